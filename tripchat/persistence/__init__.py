"""Persistence package exports."""

from tripchat.persistence.models import MessageRecord, PlanRecord, TripRecord, TripSummaryItem
from tripchat.persistence.repository import (
    ConversationLogRepository,
    NoopConversationLogRepository,
    get_log_repository,
)
from tripchat.persistence.sqlite_repository import SQLiteConversationLogRepository

__all__ = [
    "ConversationLogRepository",
    "MessageRecord",
    "NoopConversationLogRepository",
    "PlanRecord",
    "SQLiteConversationLogRepository",
    "TripRecord",
    "TripSummaryItem",
    "get_log_repository",
]
