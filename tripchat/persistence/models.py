"""Persistence-layer record schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tripchat.domain.enums import MessageRole


class TripRecord(BaseModel):
    trip_id: str
    destination: str
    days: int = Field(gt=0)
    created_at: str = ""


class PlanRecord(BaseModel):
    trip_id: str
    plan: str
    input_text: str
    updated_at: str


class MessageRecord(BaseModel):
    message_id: int
    trip_id: str
    content: str
    role: MessageRole
    created_at: str


class TripSummaryItem(BaseModel):
    trip_id: str
    destination: str
    days: int
    created_at: str
    message_count: int = 0


__all__ = ["MessageRecord", "PlanRecord", "TripRecord", "TripSummaryItem"]
