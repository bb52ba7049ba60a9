import argparse
import sys

import pytest

import main
from pos_gateway.server.bootstrap import BootstrapError


def test_serve_exits_nonzero_when_bootstrap_fails(monkeypatch):
	async def failing_bootstrap(app, cfg):
		raise BootstrapError("Route registration failed: boom")

	monkeypatch.setattr(main, "bootstrap", failing_bootstrap)
	with pytest.raises(SystemExit) as excinfo:
		main.cmd_serve(argparse.Namespace(port=None, host=None))
	assert excinfo.value.code == 1


def test_serve_applies_port_override(monkeypatch):
	seen = {}

	async def fake_bootstrap(app, cfg):
		seen["port"] = cfg.port
		seen["host"] = cfg.host

	monkeypatch.setattr(main, "bootstrap", fake_bootstrap)
	main.cmd_serve(argparse.Namespace(port=6001, host="127.0.0.1"))
	assert seen == {"port": 6001, "host": "127.0.0.1"}


def test_arg_parser_requires_command():
	parser = main.build_arg_parser()
	args = parser.parse_args(["serve", "--port", "7000"])
	assert args.port == 7000
	assert args.func is main.cmd_serve


def test_runtime_attribute_error_is_not_swallowed(monkeypatch):
	async def broken_bootstrap(app, cfg):
		raise AttributeError("handle has no attribute 'listen'")

	monkeypatch.setattr(main, "bootstrap", broken_bootstrap)
	monkeypatch.setattr(sys, "argv", ["main.py", "serve"])
	with pytest.raises(AttributeError):
		main.main()
