from typing import Iterable

from fastapi import Depends, FastAPI

from ..config.config import DEFAULT_ALLOWED_ORIGINS
from .body import decode_body
from .cors import OriginPolicyMiddleware
from .models import MessageResponse
from .response_logger import ResponseLogger


def create_app(allowed_origins: Iterable[str] | None = None) -> FastAPI:
	"""
	Build the gateway application with its request pipeline in place:
	origin policy, then response logging, then body decoding ahead of
	every route.

	Business routes, the error responder and the event bridge are attached
	later by the bootstrap sequence.
	"""
	app = FastAPI(dependencies=[Depends(decode_body)])
	# add_middleware prepends, so the origin policy ends up outermost
	app.add_middleware(ResponseLogger)
	app.add_middleware(
		OriginPolicyMiddleware,
		allowed_origins=list(allowed_origins) if allowed_origins is not None else DEFAULT_ALLOWED_ORIGINS,
	)

	@app.get("/api/hello", response_model=MessageResponse)
	async def hello() -> MessageResponse:
		return MessageResponse(message="Hello from backend!")

	return app
