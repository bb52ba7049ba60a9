import asyncio
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so `import pos_gateway` works under pytest
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
	sys.path.insert(0, str(ROOT_DIR))

from pos_gateway.server.handle import ServerHandle


class FakeHub:
	def __init__(self) -> None:
		self.calls = []
		self.initialized_with = []

	async def initialize(self, server, path="/ws"):
		self.initialized_with.append((server, path))

	def broadcast_popup_close(self, success):
		self.calls.append(("popup_close", success))

	def broadcast_payment_success(self, transaction_id):
		self.calls.append(("payment_success", transaction_id))


class FakeServerHandle(ServerHandle):
	"""Records the listen call instead of binding a socket."""

	def __init__(self, app) -> None:
		super().__init__(app)
		self.listen_calls = []

	async def listen(self, port, host="0.0.0.0", on_listening=None):
		self.listen_calls.append((port, host))
		self.port = port
		self.listening = True
		if on_listening is not None:
			on_listening(port)


def build_prepared_app(register_routes=None, hub=None, cfg=None):
	from pos_gateway.config.config import AppConfig
	from pos_gateway.server.bootstrap import prepare
	from pos_gateway.server.http import create_app
	from pos_gateway.websocket.hub import get_broadcast_hub

	cfg = cfg or AppConfig()
	hub = hub or FakeHub()
	app = create_app(cfg.allowed_origins)
	kwargs = {"initialize_websocket": hub.initialize}
	if register_routes is not None:
		kwargs["register_routes"] = register_routes
	asyncio.run(prepare(app, cfg, **kwargs))
	app.dependency_overrides[get_broadcast_hub] = lambda: hub
	return app, hub


@pytest.fixture
def app_client():
	app, hub = build_prepared_app()
	client = TestClient(app, follow_redirects=False)
	return client, hub
