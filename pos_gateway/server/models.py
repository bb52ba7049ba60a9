from typing import Literal

from pydantic import BaseModel


class StatusResponse(BaseModel):
	status: Literal["ok"]


class MessageResponse(BaseModel):
	message: str


class PopupCloseResponse(BaseModel):
	success: bool
	message: str


class NotifyErrorResponse(BaseModel):
	error: str
