"""API request/response models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

TRIP_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class CreateTripRequest(BaseModel):
    # validated by the creation flow so errors name the offending field
    destination: Optional[Any] = Field(default=None, description="旅行目的地")
    days: Optional[Any] = Field(default=None, description="旅行天数（正整数或其文本形式）")


class CreateTripResponse(BaseModel):
    trip_id: str
    location: str


class TripDefinitionResponse(BaseModel):
    trip_id: str
    destination: str
    days: int
    plan: str


class ChatRequest(BaseModel):
    # validated by the chat flow, same as CreateTripRequest
    message: Optional[Any] = Field(default=None, description="用户消息")


class ChatResponse(BaseModel):
    trip_id: str
    reply: str


class MessageItemResponse(BaseModel):
    message: str
    role: str
    created_at: str


class HistoryResponse(BaseModel):
    trip_id: str
    status: str = Field(description="ok / empty")
    detail: str = ""
    messages: list[MessageItemResponse] = Field(default_factory=list)


class TripSummaryItemResponse(BaseModel):
    trip_id: str
    destination: str
    days: int
    created_at: str
    message_count: int = 0


class TripListResponse(BaseModel):
    items: list[TripSummaryItemResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = "ok"
