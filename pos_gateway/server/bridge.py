import logging

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from ..websocket.hub import BroadcastHub, get_broadcast_hub
from .body import get_body
from .models import MessageResponse, NotifyErrorResponse, PopupCloseResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/popup/close", response_model=PopupCloseResponse)
async def popup_close(
		request: Request,
		background_tasks: BackgroundTasks,
		hub: BroadcastHub = Depends(get_broadcast_hub),
) -> PopupCloseResponse:
	body = get_body(request)
	success = body.get("success") if isinstance(body, dict) else None
	background_tasks.add_task(hub.broadcast_popup_close, success)
	return PopupCloseResponse(success=True, message="Popup close signal sent")


@router.post("/NotifyPos/ReceiveNotify", response_model=MessageResponse)
async def receive_notify(
		request: Request,
		background_tasks: BackgroundTasks,
		hub: BroadcastHub = Depends(get_broadcast_hub),
):
	try:
		transaction_uuid = get_body(request).get("TransactionUuid")
		logger.info(f"Received payment notification: {transaction_uuid}")
		background_tasks.add_task(hub.broadcast_payment_success, transaction_uuid)
		return MessageResponse(message="Notification received successfully.")
	except Exception as e:
		logger.error(f"Error processing payment notification: {e}", exc_info=True)
		return JSONResponse(
			NotifyErrorResponse(error="Failed to process notification").model_dump(),
			status_code=500,
		)


def register_event_bridge(app: FastAPI) -> None:
	app.include_router(router, prefix="/api")
