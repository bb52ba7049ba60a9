import errno
import logging
from typing import Awaitable, Callable

from fastapi import FastAPI

from ..api.routes import register_routes as _default_register_routes
from ..config.config import AppConfig
from ..websocket.hub import initialize_websocket_server
from .bridge import register_event_bridge
from .errors import install_error_responder
from .handle import ServerHandle

logger = logging.getLogger(__name__)

RegisterRoutes = Callable[[FastAPI], Awaitable[ServerHandle]]
InitializeWebSocket = Callable[..., Awaitable[None]]


class BootstrapError(RuntimeError):
	pass


def listen_error_observer(port: int) -> Callable[[OSError], None]:
	def _observe(err: OSError) -> None:
		logger.error(f"Server error: {err}")
		if err.errno == errno.EADDRINUSE:
			logger.warning(f"Port {port} is already in use")
	return _observe


async def prepare(
		app: FastAPI,
		cfg: AppConfig,
		register_routes: RegisterRoutes = _default_register_routes,
		initialize_websocket: InitializeWebSocket = initialize_websocket_server,
) -> ServerHandle:
	"""
	Run the bootstrap steps that precede binding: routes, error responder,
	event bridge and a best-effort WebSocket start.
	"""
	try:
		server = await register_routes(app)
	except Exception as e:
		raise BootstrapError(f"Route registration failed: {e}") from e

	install_error_responder(app)
	register_event_bridge(app)

	try:
		await initialize_websocket(server, cfg.websocket_path)
		logger.info("WebSocket server initialized")
	except Exception as e:
		logger.error(f"Failed to start WebSocket: {e}", exc_info=True)

	return server


async def bootstrap(
		app: FastAPI,
		cfg: AppConfig,
		register_routes: RegisterRoutes = _default_register_routes,
		initialize_websocket: InitializeWebSocket = initialize_websocket_server,
) -> ServerHandle:
	server = await prepare(app, cfg, register_routes, initialize_websocket)
	server.on_error(listen_error_observer(cfg.port))

	def _on_listening(port: int) -> None:
		logger.info(f"Backend running on http://localhost:{port}")

	await server.listen(cfg.port, cfg.host, on_listening=_on_listening)
	return server
