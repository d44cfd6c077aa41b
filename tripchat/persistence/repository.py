"""Conversation log store interface and factory."""

from __future__ import annotations

from typing import Protocol

from tripchat.config.settings import Settings
from tripchat.domain.enums import MessageRole
from tripchat.persistence.models import MessageRecord, PlanRecord, TripRecord, TripSummaryItem
from tripchat.persistence.sqlite_repository import SQLiteConversationLogRepository, utc_now


class ConversationLogRepository(Protocol):
    backend: str

    def insert_trip(self, record: TripRecord) -> None: ...

    def insert_plan(self, record: PlanRecord) -> None: ...

    def insert_message(self, trip_id: str, content: str, role: MessageRole) -> MessageRecord: ...

    def message_exists(self, trip_id: str) -> bool: ...

    def list_messages(self, trip_id: str) -> list[MessageRecord]: ...

    def get_trip(self, trip_id: str) -> TripRecord | None: ...

    def trip_exists(self, trip_id: str) -> bool: ...

    def get_plan(self, trip_id: str) -> PlanRecord | None: ...

    def list_trips(self, limit: int = 20) -> list[TripSummaryItem]: ...


class NoopConversationLogRepository:
    """Accepts writes and remembers nothing; every trip looks history-free."""

    backend = "noop"

    def insert_trip(self, record: TripRecord) -> None:
        _ = record

    def insert_plan(self, record: PlanRecord) -> None:
        _ = record

    def insert_message(self, trip_id: str, content: str, role: MessageRole) -> MessageRecord:
        return MessageRecord(
            message_id=0,
            trip_id=trip_id,
            content=content,
            role=MessageRole(role),
            created_at=utc_now(),
        )

    def message_exists(self, trip_id: str) -> bool:
        _ = trip_id
        return False

    def list_messages(self, trip_id: str) -> list[MessageRecord]:
        _ = trip_id
        return []

    def get_trip(self, trip_id: str) -> TripRecord | None:
        _ = trip_id
        return None

    def trip_exists(self, trip_id: str) -> bool:
        _ = trip_id
        return False

    def get_plan(self, trip_id: str) -> PlanRecord | None:
        _ = trip_id
        return None

    def list_trips(self, limit: int = 20) -> list[TripSummaryItem]:
        _ = limit
        return []


def get_log_repository(settings: Settings) -> ConversationLogRepository:
    if not settings.log_store_enabled:
        return NoopConversationLogRepository()
    return SQLiteConversationLogRepository(settings.log_store_db)


__all__ = [
    "ConversationLogRepository",
    "NoopConversationLogRepository",
    "get_log_repository",
]
