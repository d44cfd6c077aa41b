"""Application request/response contracts."""

from __future__ import annotations

from pydantic import BaseModel


class CreateTripResult(BaseModel):
    trip_id: str
    destination: str
    days: int
    plan: str


class ChatTurnResult(BaseModel):
    trip_id: str
    reply: str
    bootstrap: bool = False
    reply_persisted: bool = False
