"""SQLite implementation of the conversation log store."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from tripchat.domain.enums import MessageRole
from tripchat.persistence.models import MessageRecord, PlanRecord, TripRecord, TripSummaryItem
from tripchat.shared.exceptions import PersistenceError


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


class SQLiteConversationLogRepository:
    backend = "sqlite"

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=5.0)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA foreign_keys=ON;")
        return conn

    @contextmanager
    def _session(self, operation: str) -> Iterator[sqlite3.Connection]:
        try:
            with self._lock, self._connect() as conn:
                yield conn
        except sqlite3.Error as exc:
            raise PersistenceError(f"{operation} failed: {exc}") from exc

    def _init_schema(self) -> None:
        with self._session("init_schema") as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS trips (
                    id TEXT PRIMARY KEY,
                    destination TEXT NOT NULL,
                    days INTEGER NOT NULL CHECK (days > 0),
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS plans (
                    plan_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    trip_id TEXT NOT NULL,
                    plan TEXT NOT NULL,
                    input_text TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS messages (
                    message_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    trip_id TEXT NOT NULL,
                    message TEXT NOT NULL,
                    messager_role TEXT NOT NULL CHECK (messager_role IN ('user', 'assistant')),
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_plans_trip_id ON plans(trip_id);
                CREATE INDEX IF NOT EXISTS idx_messages_trip_id ON messages(trip_id, message_id);
                """
            )

    def insert_trip(self, record: TripRecord) -> None:
        with self._session("insert_trip") as conn:
            conn.execute(
                "INSERT INTO trips (id, destination, days, created_at) VALUES (?, ?, ?, ?)",
                (record.trip_id, record.destination, record.days, record.created_at or utc_now()),
            )

    def insert_plan(self, record: PlanRecord) -> None:
        with self._session("insert_plan") as conn:
            conn.execute(
                "INSERT INTO plans (trip_id, plan, input_text, updated_at) VALUES (?, ?, ?, ?)",
                (record.trip_id, record.plan, record.input_text, record.updated_at),
            )

    def insert_message(self, trip_id: str, content: str, role: MessageRole) -> MessageRecord:
        created_at = utc_now()
        role = MessageRole(role)
        with self._session("insert_message") as conn:
            cursor = conn.execute(
                "INSERT INTO messages (trip_id, message, messager_role, created_at) VALUES (?, ?, ?, ?)",
                (trip_id, content, role.value, created_at),
            )
            message_id = cursor.lastrowid
        return MessageRecord(
            message_id=message_id,
            trip_id=trip_id,
            content=content,
            role=role,
            created_at=created_at,
        )

    def message_exists(self, trip_id: str) -> bool:
        with self._session("message_exists") as conn:
            row = conn.execute(
                "SELECT 1 FROM messages WHERE trip_id = ? LIMIT 1",
                (trip_id,),
            ).fetchone()
        return row is not None

    def list_messages(self, trip_id: str) -> list[MessageRecord]:
        with self._session("list_messages") as conn:
            rows = conn.execute(
                """
                SELECT message_id, trip_id, message, messager_role, created_at
                FROM messages
                WHERE trip_id = ?
                ORDER BY message_id ASC
                """,
                (trip_id,),
            ).fetchall()

        return [
            MessageRecord(
                message_id=row[0],
                trip_id=row[1],
                content=row[2],
                role=MessageRole(row[3]),
                created_at=row[4],
            )
            for row in rows
        ]

    def get_trip(self, trip_id: str) -> TripRecord | None:
        with self._session("get_trip") as conn:
            row = conn.execute(
                "SELECT id, destination, days, created_at FROM trips WHERE id = ?",
                (trip_id,),
            ).fetchone()
        if row is None:
            return None
        return TripRecord(trip_id=row[0], destination=row[1], days=row[2], created_at=row[3])

    def trip_exists(self, trip_id: str) -> bool:
        return self.get_trip(trip_id) is not None

    def get_plan(self, trip_id: str) -> PlanRecord | None:
        with self._session("get_plan") as conn:
            row = conn.execute(
                """
                SELECT trip_id, plan, input_text, updated_at
                FROM plans
                WHERE trip_id = ?
                ORDER BY plan_id DESC
                LIMIT 1
                """,
                (trip_id,),
            ).fetchone()
        if row is None:
            return None
        return PlanRecord(trip_id=row[0], plan=row[1], input_text=row[2], updated_at=row[3])

    def list_trips(self, limit: int = 20) -> list[TripSummaryItem]:
        safe_limit = max(1, min(limit, 100))
        with self._session("list_trips") as conn:
            rows = conn.execute(
                """
                SELECT t.id, t.destination, t.days, t.created_at, COUNT(m.message_id)
                FROM trips t
                LEFT JOIN messages m ON m.trip_id = t.id
                GROUP BY t.id
                ORDER BY t.created_at DESC, t.rowid DESC
                LIMIT ?
                """,
                (safe_limit,),
            ).fetchall()

        return [
            TripSummaryItem(
                trip_id=row[0],
                destination=row[1],
                days=row[2],
                created_at=row[3],
                message_count=row[4],
            )
            for row in rows
        ]


__all__ = ["SQLiteConversationLogRepository", "utc_now"]
