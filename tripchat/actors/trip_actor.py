"""Per-trip actor: exclusive owner of one trip's definition.

Every operation addressed to a trip id runs under that id's re-entrant lock,
so two calls on the same actor never interleave. The lock is also exposed via
``exclusive()`` so callers can make a multi-step operation atomic with
respect to the actor.
"""

from __future__ import annotations

import threading
import weakref
from contextlib import contextmanager
from typing import Iterator

from pydantic import BaseModel

from tripchat.actors.storage import ActorStorage, ActorStorageError
from tripchat.domain.enums import ActorState, ReinitPolicy
from tripchat.domain.models import TripDefinition
from tripchat.shared.exceptions import ActorInitError, AlreadyInitializedError

_FIELDS = ("destination", "days", "plan")


class InitResult(BaseModel):
    trip_id: str
    initialized: bool = True
    overwritten: bool = False


def _check_init_args(destination: str, days: int, plan: str) -> None:
    if not isinstance(destination, str) or not destination.strip():
        raise ActorInitError("destination must be a non-empty string")
    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise ActorInitError("days must be a positive integer")
    if not isinstance(plan, str) or not plan.strip():
        raise ActorInitError("plan must be a non-empty string")


class TripLock:
    """Re-entrant lock for one trip id; weakly referenced by the registry."""

    __slots__ = ("_lock", "__weakref__")

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def __enter__(self) -> "TripLock":
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self._lock.release()


class TripActor:
    def __init__(
        self,
        trip_id: str,
        storage: ActorStorage,
        lock: TripLock,
        reinit_policy: ReinitPolicy = ReinitPolicy.OVERWRITE,
    ) -> None:
        self.trip_id = trip_id
        self._storage = storage
        self._lock = lock
        self._reinit_policy = reinit_policy

    @contextmanager
    def exclusive(self) -> Iterator["TripActor"]:
        with self._lock:
            yield self

    def _load(self) -> TripDefinition | None:
        raw = self._storage.load(self.trip_id)
        if any(raw.get(name) is None for name in _FIELDS):
            return None
        return TripDefinition(destination=raw["destination"], days=raw["days"], plan=raw["plan"])

    @property
    def state(self) -> ActorState:
        with self._lock:
            return ActorState.INITIALIZED if self._load() is not None else ActorState.UNINITIALIZED

    def init(self, destination: str, days: int, plan: str) -> InitResult:
        _check_init_args(destination, days, plan)
        with self._lock:
            try:
                existing = self._load()
            except ActorStorageError as exc:
                raise ActorInitError(str(exc)) from exc
            if existing is not None and self._reinit_policy is ReinitPolicy.REJECT:
                raise AlreadyInitializedError(self.trip_id)
            try:
                self._storage.store(
                    self.trip_id,
                    {"destination": destination, "days": days, "plan": plan},
                )
            except ActorStorageError as exc:
                raise ActorInitError(str(exc)) from exc
            return InitResult(trip_id=self.trip_id, overwritten=existing is not None)

    def read(self) -> TripDefinition | None:
        """Return the stored definition, or None while uninitialized."""
        with self._lock:
            return self._load()


class TripActorRegistry:
    """Hands out one actor (and one lock) per trip id.

    A trip's lock lives only while some ``TripActor`` for that id is
    referenced, so lookups of unknown ids leave nothing behind. Concurrent
    callers always share the lock because each of them keeps it alive.
    """

    def __init__(self, storage: ActorStorage, reinit_policy: ReinitPolicy = ReinitPolicy.OVERWRITE):
        self.storage = storage
        self.reinit_policy = reinit_policy
        self._locks: weakref.WeakValueDictionary[str, TripLock] = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()

    @property
    def backend(self) -> str:
        return getattr(self.storage, "backend", "unknown")

    def _lock_for(self, trip_id: str) -> TripLock:
        with self._registry_lock:
            lock = self._locks.get(trip_id)
            if lock is None:
                lock = TripLock()
                self._locks[trip_id] = lock
            return lock

    def get(self, trip_id: str) -> TripActor:
        return TripActor(trip_id, self.storage, self._lock_for(trip_id), self.reinit_policy)

    def list_ids(self) -> list[str]:
        return self.storage.list_ids()

    @property
    def active_count(self) -> int:
        with self._registry_lock:
            return len(self._locks)


__all__ = ["InitResult", "TripActor", "TripActorRegistry", "TripLock"]
