import logging
import socket
from typing import Callable

import uvicorn
from fastapi import FastAPI

logger = logging.getLogger(__name__)

ErrorObserver = Callable[[OSError], None]


class ServerHandle:
	"""
	Listening-capable wrapper around the application.

	The socket is bound here rather than by uvicorn so that bind failures
	reach the registered error observers instead of exiting the process.
	"""

	def __init__(self, app: FastAPI, log_level: str = "info") -> None:
		self.app = app
		self.log_level = log_level
		self.port: int | None = None
		self.listening = False
		self._error_observers: list[ErrorObserver] = []
		self._server: uvicorn.Server | None = None

	def on_error(self, observer: ErrorObserver) -> None:
		self._error_observers.append(observer)

	def _emit_error(self, err: OSError) -> None:
		for observer in list(self._error_observers):
			try:
				observer(err)
			except Exception:
				logger.exception("Listen error observer failed")

	def bind(self, port: int, host: str = "0.0.0.0") -> socket.socket:
		sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
		sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
		try:
			sock.bind((host, port))
			sock.listen()
		except OSError as err:
			sock.close()
			self._emit_error(err)
			raise
		sock.setblocking(False)
		self.port = sock.getsockname()[1]
		return sock

	async def listen(self, port: int, host: str = "0.0.0.0", on_listening: Callable[[int], None] | None = None) -> None:
		sock = self.bind(port, host)
		config = uvicorn.Config(self.app, log_level=self.log_level, log_config=None)
		self._server = uvicorn.Server(config)
		self.listening = True
		if on_listening is not None:
			on_listening(self.port)
		try:
			await self._server.serve(sockets=[sock])
		finally:
			self.listening = False
			sock.close()

	def close(self) -> None:
		if self._server is not None:
			self._server.should_exit = True
