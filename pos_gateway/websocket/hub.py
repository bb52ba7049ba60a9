import asyncio
import json
import logging
import threading
from typing import Any, Optional

from fastapi import WebSocket, WebSocketDisconnect

from ..server.handle import ServerHandle

logger = logging.getLogger(__name__)


class BroadcastHub:
	"""Fans out POS events to every connected WebSocket client."""

	def __init__(self) -> None:
		self._connections: set[WebSocket] = set()
		self._lock = threading.Lock()
		self._loop: asyncio.AbstractEventLoop | None = None
		self._pending: set[asyncio.Future[Any]] = set()
		self.initialized = False
		self.path: str | None = None

	@property
	def client_count(self) -> int:
		with self._lock:
			return len(self._connections)

	async def initialize(self, server: ServerHandle, path: str = "/ws") -> None:
		if self.initialized:
			return
		server.app.add_api_websocket_route(path, self._endpoint)
		self.path = path
		self.initialized = True
		logger.info(f"WebSocket endpoint registered at {path}")

	async def _endpoint(self, websocket: WebSocket) -> None:
		with self._lock:
			self._loop = asyncio.get_running_loop()
			self._connections.add(websocket)
		try:
			await websocket.accept()
			logger.info(f"WebSocket client connected (total: {self.client_count})")
			while True:
				# Clients only listen; inbound frames are drained and ignored.
				await websocket.receive_text()
		except WebSocketDisconnect:
			pass
		finally:
			with self._lock:
				self._connections.discard(websocket)
			logger.info(f"WebSocket client disconnected (total: {self.client_count})")

	def broadcast_popup_close(self, success: Any) -> None:
		self._broadcast({"type": "popup_close", "success": success})

	def broadcast_payment_success(self, transaction_id: Any) -> None:
		self._broadcast({"type": "payment_success", "transactionUuid": transaction_id})

	def _broadcast(self, message: dict[str, Any]) -> None:
		with self._lock:
			targets = list(self._connections)
			loop = self._loop
		if not targets or loop is None or loop.is_closed():
			logger.debug(f"No WebSocket clients connected; dropping {message['type']}")
			return
		payload = json.dumps(message)
		try:
			running = asyncio.get_running_loop()
		except RuntimeError:
			running = None
		if running is loop:
			task = loop.create_task(self._send_all(targets, payload))
			self._pending.add(task)
			task.add_done_callback(self._pending.discard)
		else:
			asyncio.run_coroutine_threadsafe(self._send_all(targets, payload), loop)

	async def _send_all(self, targets: list[WebSocket], payload: str) -> None:
		dead: list[WebSocket] = []
		for connection in targets:
			try:
				await connection.send_text(payload)
			except Exception as e:
				logger.warning(f"Failed to send to WebSocket: {e}")
				dead.append(connection)
		if dead:
			with self._lock:
				for connection in dead:
					self._connections.discard(connection)


_singleton_lock = threading.Lock()
_singleton_hub: Optional[BroadcastHub] = None


def get_broadcast_hub() -> BroadcastHub:
	global _singleton_hub
	if _singleton_hub is None:
		with _singleton_lock:
			if _singleton_hub is None:
				_singleton_hub = BroadcastHub()
	return _singleton_hub  # type: ignore[return-value]


async def initialize_websocket_server(server: ServerHandle, path: str = "/ws") -> None:
	await get_broadcast_hub().initialize(server, path)


def broadcast_popup_close(success: Any) -> None:
	get_broadcast_hub().broadcast_popup_close(success)


def broadcast_payment_success(transaction_id: Any) -> None:
	get_broadcast_hub().broadcast_payment_success(transaction_id)
