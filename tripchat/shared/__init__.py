"""Shared cross-layer types and exceptions."""

from tripchat.shared.exceptions import (
    ActorInitError,
    AlreadyInitializedError,
    GenerationError,
    PersistenceError,
    TripChatError,
    TripNotFoundError,
    ValidationError,
)

__all__ = [
    "ActorInitError",
    "AlreadyInitializedError",
    "GenerationError",
    "PersistenceError",
    "TripChatError",
    "TripNotFoundError",
    "ValidationError",
]
