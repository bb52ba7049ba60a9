import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware import Middleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Internal Server Error"


class GatewayError(Exception):
	def __init__(self, message: str, status_code: int | None = None) -> None:
		super().__init__(message)
		self.message = message
		self.status_code = status_code


def resolve_status(exc: BaseException) -> int:
	status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
	try:
		return int(status) if status else 500
	except (TypeError, ValueError):
		return 500


def resolve_message(exc: BaseException) -> str:
	for attr in ("message", "detail"):
		value = getattr(exc, attr, None)
		if isinstance(value, str) and value:
			return value
	return str(exc) or DEFAULT_ERROR_MESSAGE


def error_response(exc: BaseException) -> JSONResponse:
	status = resolve_status(exc)
	if status >= 500:
		logger.error("Server error: %s", exc, exc_info=exc)
	headers: Any = getattr(exc, "headers", None)
	return JSONResponse({"message": resolve_message(exc)}, status_code=status, headers=headers)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
	return error_response(exc)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
	return JSONResponse({"message": "Invalid request"}, status_code=422)


class FallbackErrorResponder:
	"""
	Turns any exception escaping the routes into a ``{"message": ...}`` JSON
	response. Sits innermost in the user middleware stack so the response
	still carries CORS headers and is seen by the response logger.
	"""

	def __init__(self, app: ASGIApp) -> None:
		self.app = app

	async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
		if scope["type"] != "http":
			await self.app(scope, receive, send)
			return

		response_started = False

		async def send_tracking(message: Message) -> None:
			nonlocal response_started
			if message["type"] == "http.response.start":
				response_started = True
			await send(message)

		try:
			await self.app(scope, receive, send_tracking)
		except Exception as exc:
			if response_started:
				raise
			response = error_response(exc)
			await response(scope, receive, send)


def install_error_responder(app: FastAPI) -> None:
	app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
	app.add_exception_handler(RequestValidationError, _handle_validation_error)
	# appended rather than added: add_middleware would make it the outermost layer
	app.user_middleware.append(Middleware(FallbackErrorResponder))
