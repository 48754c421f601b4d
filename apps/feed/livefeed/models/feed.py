"""Pydantic models for the feed's HTTP responses and subscriber messages."""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

ACK_MESSAGE = "Admin connected to live feed"
COLLECT_MESSAGE = "Location verified and broadcasted"


class CollectResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str = COLLECT_MESSAGE
    delivered: int
    stored: bool


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str
    message: str


class StatusResponse(BaseModel):
    status: str = "running"
    active_admins: int = Field(alias="activeAdmins")
    uptime: float

    class Config:
        populate_by_name = True


class ConnectionAck(BaseModel):
    """Handshake sent to every new subscriber."""

    type: Literal["connection_ack"] = "connection_ack"
    id: str
    message: str = ACK_MESSAGE


class LocationUpdate(BaseModel):
    """Broadcast envelope around one event."""

    type: Literal["location_update"] = "location_update"
    data: dict[str, Any]
