from fastapi import APIRouter, FastAPI

from ..server.handle import ServerHandle
from ..server.models import StatusResponse

router = APIRouter()


@router.get("/health", response_model=StatusResponse)
async def health() -> StatusResponse:
	return StatusResponse(status="ok")


async def register_routes(app: FastAPI) -> ServerHandle:
	"""Mount the ``/api`` business routes and hand back a server for the app."""
	app.include_router(router, prefix="/api")
	return ServerHandle(app)
