"""Service layer public exports."""

from tripchat.services.history_service import get_trip_definition, list_trip_messages, list_trips
from tripchat.services.reconcile_service import ReconcileReport, reconcile

__all__ = [
    "ReconcileReport",
    "get_trip_definition",
    "list_trip_messages",
    "list_trips",
    "reconcile",
]
