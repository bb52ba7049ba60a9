import logging
import time

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

_LOGGED_PREFIX = "/api"


def format_log_line(method: str, path: str, status: int, duration_ms: int, json_body: str | None = None) -> str:
	line = f"{method} {path} {status} in {duration_ms}ms"
	if json_body:
		line += f" :: {json_body}"
	return line


def _is_json(content_type: str | None) -> bool:
	if not content_type:
		return False
	media_type = content_type.split(";", 1)[0].strip().lower()
	return media_type == "application/json" or media_type.endswith("+json")


class ResponseLogger:
	"""
	Emits one summary line for every ``/api`` request once its response has
	been fully sent.

	The JSON payload is taken from the body messages on their way to the
	client; the messages themselves are forwarded untouched.
	"""

	def __init__(self, app: ASGIApp) -> None:
		self.app = app

	async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
		if scope["type"] != "http":
			await self.app(scope, receive, send)
			return

		start = time.monotonic()
		method = scope["method"]
		path = scope["path"]
		status_code = 0
		capture_body = False
		chunks: list[bytes] = []

		async def send_with_capture(message: Message) -> None:
			nonlocal status_code, capture_body
			if message["type"] == "http.response.start":
				status_code = message["status"]
				capture_body = _is_json(Headers(raw=message.get("headers", [])).get("content-type"))
			elif message["type"] == "http.response.body" and capture_body:
				chunks.append(message.get("body", b""))

			await send(message)

			if message["type"] == "http.response.body" and not message.get("more_body", False):
				duration_ms = int((time.monotonic() - start) * 1000)
				self._emit(method, path, status_code, duration_ms, chunks if capture_body else None)

		await self.app(scope, receive, send_with_capture)

	@staticmethod
	def _emit(method: str, path: str, status_code: int, duration_ms: int, chunks: list[bytes] | None) -> None:
		if not path.startswith(_LOGGED_PREFIX):
			return
		try:
			json_body = b"".join(chunks).decode("utf-8") if chunks else None
			logger.info(format_log_line(method, path, status_code, duration_ms, json_body))
		except Exception:
			# a broken log line must never turn into a failed request
			pass
