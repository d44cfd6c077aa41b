"""Read-only history and trip definition service."""

from __future__ import annotations

from tripchat.application.context import AppContext
from tripchat.domain.models import TripDefinition
from tripchat.persistence.models import MessageRecord, TripSummaryItem

NO_MESSAGES_YET = "No messages yet"


def list_trip_messages(*, ctx: AppContext, trip_id: str) -> list[MessageRecord]:
    if not ctx.log_repo.message_exists(trip_id):
        return []
    return list(ctx.log_repo.list_messages(trip_id))


def get_trip_definition(*, ctx: AppContext, trip_id: str) -> TripDefinition | None:
    """Definition straight from the trip actor, bypassing the log store."""
    return ctx.actors.get(trip_id).read()


def list_trips(*, ctx: AppContext, limit: int = 20) -> list[TripSummaryItem]:
    safe_limit = max(1, min(limit, 100))
    return list(ctx.log_repo.list_trips(safe_limit))


__all__ = ["NO_MESSAGES_YET", "get_trip_definition", "list_trip_messages", "list_trips"]
