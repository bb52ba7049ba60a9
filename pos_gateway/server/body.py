import json
from typing import Any
from urllib.parse import parse_qsl

from fastapi import Request
from starlette.requests import HTTPConnection

from .errors import GatewayError


class BodyDecodeError(GatewayError):
	def __init__(self, message: str = "Invalid JSON in request body") -> None:
		super().__init__(message, status_code=400)


def _media_type(request: Request) -> str:
	return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


async def decode_body(request: HTTPConnection) -> Any:
	"""
	Application-wide dependency: parses JSON and urlencoded form bodies onto
	``request.state.body`` before the route handler runs.

	WebSocket routes inherit app dependencies too; they have no body.
	"""
	if not isinstance(request, Request):
		return None
	media_type = _media_type(request)
	raw = await request.body()
	body: Any = {}
	if media_type == "application/json" or media_type.endswith("+json"):
		if raw.strip():
			try:
				body = json.loads(raw)
			except (UnicodeDecodeError, ValueError) as e:
				raise BodyDecodeError() from e
	elif media_type == "application/x-www-form-urlencoded":
		try:
			body = dict(parse_qsl(raw.decode("utf-8"), keep_blank_values=True))
		except UnicodeDecodeError as e:
			raise BodyDecodeError("Invalid form data in request body") from e
	request.state.body = body
	return body


def get_body(request: Request) -> Any:
	return getattr(request.state, "body", {})
