from typing import Iterable

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

ALLOW_HEADERS = "Origin, X-Requested-With, Content-Type, Accept, Authorization, x-tenant-id"
ALLOW_METHODS = "GET, POST, PUT, DELETE, PATCH, OPTIONS"

# Matched anywhere in the origin string, not only as a hostname suffix.
_ALLOWED_ORIGIN_FRAGMENTS = ("replit.dev", "vercel.app")


def is_origin_allowed(origin: str | None, allowed_origins: Iterable[str]) -> bool:
	if not origin:
		return False
	if origin in allowed_origins:
		return True
	return any(fragment in origin for fragment in _ALLOWED_ORIGIN_FRAGMENTS)


def cors_headers(origin: str | None, allowed_origins: Iterable[str]) -> dict[str, str]:
	return {
		"Access-Control-Allow-Headers": ALLOW_HEADERS,
		"Access-Control-Allow-Methods": ALLOW_METHODS,
		"Access-Control-Allow-Credentials": "true",
		"Access-Control-Allow-Origin": origin if is_origin_allowed(origin, allowed_origins) else "*",
	}


class OriginPolicyMiddleware:
	"""
	Stamps the CORS headers on every HTTP response and answers pre-flight
	``OPTIONS`` requests itself with an empty 200.
	"""

	def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]) -> None:
		self.app = app
		self.allowed_origins = frozenset(allowed_origins)

	async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
		if scope["type"] != "http":
			await self.app(scope, receive, send)
			return

		origin = Headers(scope=scope).get("origin")
		headers = cors_headers(origin, self.allowed_origins)

		if scope["method"] == "OPTIONS":
			await send({
				"type": "http.response.start",
				"status": 200,
				"headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]
				+ [(b"content-length", b"0")],
			})
			await send({"type": "http.response.body", "body": b""})
			return

		async def send_with_cors(message: Message) -> None:
			if message["type"] == "http.response.start":
				response_headers = MutableHeaders(scope=message)
				for key, value in headers.items():
					response_headers[key] = value
			await send(message)

		await self.app(scope, receive, send_with_cors)
