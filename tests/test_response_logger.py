import logging
import re

from pos_gateway.server import response_logger
from pos_gateway.server.response_logger import format_log_line

LOGGER_NAME = "pos_gateway.server.response_logger"


def _lines(caplog):
	return [r.getMessage() for r in caplog.records if r.name == LOGGER_NAME]


def test_api_request_logs_one_line_with_json_body(app_client, caplog):
	caplog.set_level(logging.INFO, logger=LOGGER_NAME)
	client, _ = app_client
	r = client.get("/api/hello")
	assert r.status_code == 200
	lines = _lines(caplog)
	assert len(lines) == 1
	assert re.fullmatch(r'GET /api/hello 200 in \d+ms :: \{"message":"Hello from backend!"\}', lines[0])


def test_logged_body_matches_bytes_sent(app_client, caplog):
	caplog.set_level(logging.INFO, logger=LOGGER_NAME)
	client, _ = app_client
	r = client.post("/api/popup/close", json={"success": False})
	line = _lines(caplog)[0]
	assert line.startswith("POST /api/popup/close 200 in ")
	assert line.endswith(" :: " + r.content.decode("utf-8"))


def test_error_responses_are_logged_with_status(app_client, caplog):
	caplog.set_level(logging.INFO, logger=LOGGER_NAME)
	client, _ = app_client
	client.get("/api/missing")
	lines = _lines(caplog)
	assert len(lines) == 1
	assert lines[0].startswith("GET /api/missing 404 in ")
	assert lines[0].endswith(':: {"message":"Not Found"}')


def test_non_api_paths_are_not_logged(app_client, caplog):
	caplog.set_level(logging.INFO, logger=LOGGER_NAME)
	client, _ = app_client
	client.get("/openapi.json")
	client.get("/elsewhere")
	assert _lines(caplog) == []


def test_preflight_is_not_logged(app_client, caplog):
	caplog.set_level(logging.INFO, logger=LOGGER_NAME)
	client, _ = app_client
	client.options("/api/hello")
	assert _lines(caplog) == []


def test_logging_failure_does_not_fail_request(app_client, monkeypatch):
	def broken(*args, **kwargs):
		raise ValueError("formatter exploded")

	monkeypatch.setattr(response_logger, "format_log_line", broken)
	client, _ = app_client
	r = client.get("/api/hello")
	assert r.status_code == 200
	assert r.json() == {"message": "Hello from backend!"}


def test_format_log_line_without_body():
	assert format_log_line("DELETE", "/api/items/1", 204, 3) == "DELETE /api/items/1 204 in 3ms"
	assert format_log_line("GET", "/api/x", 200, 0, '{"a":1}') == 'GET /api/x 200 in 0ms :: {"a":1}'
