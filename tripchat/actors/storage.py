"""Actor-local durable storage: in-memory default, SQLite file or Redis."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any, Protocol

import redis

from tripchat.config.settings import Settings
from tripchat.shared.exceptions import PersistenceError

_logger = logging.getLogger("tripchat.actors")

_DEFAULT_PREFIX = "tripchat:actor:"


class ActorStorageError(PersistenceError):
    """Actor storage backend failed."""


class ActorStorage(Protocol):
    backend: str

    def load(self, trip_id: str) -> dict[str, Any]: ...

    def store(self, trip_id: str, fields: dict[str, Any]) -> None: ...

    def list_ids(self) -> list[str]: ...


class MemoryActorStorage:
    """Thread-safe in-process storage; state is lost on restart."""

    backend = "memory"

    def __init__(self) -> None:
        self._data: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def load(self, trip_id: str) -> dict[str, Any]:
        with self._lock:
            return dict(self._data.get(trip_id, {}))

    def store(self, trip_id: str, fields: dict[str, Any]) -> None:
        with self._lock:
            current = self._data.setdefault(trip_id, {})
            current.update(fields)

    def list_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class SQLiteActorStorage:
    """Key/value rows per trip in a database file separate from the log store."""

    backend = "sqlite"

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=5.0)
        conn.execute("PRAGMA journal_mode=WAL;")
        return conn

    def _init_schema(self) -> None:
        with self._lock, self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS actor_state (
                    trip_id TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value_json TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (trip_id, key)
                )
                """
            )

    def load(self, trip_id: str) -> dict[str, Any]:
        try:
            with self._lock, self._connect() as conn:
                rows = conn.execute(
                    "SELECT key, value_json FROM actor_state WHERE trip_id = ?",
                    (trip_id,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise ActorStorageError(f"actor load failed for {trip_id}: {exc}") from exc
        return {key: json.loads(raw) for key, raw in rows}

    def store(self, trip_id: str, fields: dict[str, Any]) -> None:
        now = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())
        try:
            # one transaction: either every field lands or none does
            with self._lock, self._connect() as conn:
                conn.executemany(
                    """
                    INSERT INTO actor_state (trip_id, key, value_json, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(trip_id, key) DO UPDATE SET
                        value_json=excluded.value_json,
                        updated_at=excluded.updated_at
                    """,
                    [
                        (trip_id, key, json.dumps(value, ensure_ascii=False), now)
                        for key, value in fields.items()
                    ],
                )
        except sqlite3.Error as exc:
            raise ActorStorageError(f"actor store failed for {trip_id}: {exc}") from exc

    def list_ids(self) -> list[str]:
        try:
            with self._lock, self._connect() as conn:
                rows = conn.execute(
                    "SELECT DISTINCT trip_id FROM actor_state ORDER BY trip_id"
                ).fetchall()
        except sqlite3.Error as exc:
            raise ActorStorageError(f"actor listing failed: {exc}") from exc
        return [row[0] for row in rows]


class RedisActorStorage:
    """One Redis hash per trip for multi-instance deployments."""

    backend = "redis"

    def __init__(self, redis_url: str, prefix: str = _DEFAULT_PREFIX, client: Any = None):
        self._prefix = prefix
        self._client = client or redis.Redis.from_url(redis_url, decode_responses=True)
        self._client.ping()

    def _key(self, trip_id: str) -> str:
        return f"{self._prefix}{trip_id}"

    def load(self, trip_id: str) -> dict[str, Any]:
        try:
            raw = self._client.hgetall(self._key(trip_id))
        except redis.RedisError as exc:
            raise ActorStorageError(f"actor load failed for {trip_id}: {exc}") from exc
        return {key: json.loads(value) for key, value in raw.items()}

    def store(self, trip_id: str, fields: dict[str, Any]) -> None:
        mapping = {key: json.dumps(value, ensure_ascii=False) for key, value in fields.items()}
        try:
            self._client.hset(self._key(trip_id), mapping=mapping)
        except redis.RedisError as exc:
            raise ActorStorageError(f"actor store failed for {trip_id}: {exc}") from exc

    def list_ids(self) -> list[str]:
        try:
            keys = list(self._client.scan_iter(match=f"{self._prefix}*"))
        except redis.RedisError as exc:
            raise ActorStorageError(f"actor listing failed: {exc}") from exc
        return sorted(key[len(self._prefix):] for key in keys)


def get_actor_storage(settings: Settings) -> ActorStorage:
    backend = settings.actor_storage_backend

    if backend == "memory":
        return MemoryActorStorage()

    if backend == "redis":
        if not settings.redis_url:
            _logger.warning("ACTOR_STORAGE_BACKEND=redis but REDIS_URL is empty; fallback to sqlite storage")
        else:
            try:
                storage = RedisActorStorage(settings.redis_url)
                _logger.info("Actor storage initialized with Redis backend")
                return storage
            except redis.RedisError as exc:
                _logger.warning("Failed to initialize Redis actor storage, fallback to sqlite: %s", exc)

    return SQLiteActorStorage(settings.actor_storage_db)


__all__ = [
    "ActorStorage",
    "ActorStorageError",
    "MemoryActorStorage",
    "RedisActorStorage",
    "SQLiteActorStorage",
    "get_actor_storage",
]
