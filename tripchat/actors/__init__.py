"""Per-trip actors and their storage backends."""

from tripchat.actors.storage import (
    ActorStorage,
    ActorStorageError,
    MemoryActorStorage,
    RedisActorStorage,
    SQLiteActorStorage,
    get_actor_storage,
)
from tripchat.actors.trip_actor import InitResult, TripActor, TripActorRegistry

__all__ = [
    "ActorStorage",
    "ActorStorageError",
    "InitResult",
    "MemoryActorStorage",
    "RedisActorStorage",
    "SQLiteActorStorage",
    "TripActor",
    "TripActorRegistry",
    "get_actor_storage",
]
