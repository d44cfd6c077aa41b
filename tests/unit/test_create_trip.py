"""Trip creation flow tests."""

from __future__ import annotations

import json
import threading
import uuid

import pytest

from tripchat.actors.storage import ActorStorageError, MemoryActorStorage
from tripchat.actors.trip_actor import TripActorRegistry
from tripchat.application.create_trip import create_trip, validate_days
from tripchat.persistence.sqlite_repository import SQLiteConversationLogRepository
from tripchat.shared.exceptions import (
    ActorInitError,
    GenerationError,
    PersistenceError,
    ValidationError,
)


def test_create_trip_initializes_actor_and_log_rows(ctx, actors, log_repo, generation):
    result = create_trip(ctx, "Paris", "5")

    assert uuid.UUID(result.trip_id)
    assert result.destination == "Paris"
    assert result.days == 5
    assert generation.plan_calls == [("Paris", 5)]

    definition = actors.get(result.trip_id).read()
    assert definition is not None
    assert definition.destination == "Paris"
    assert definition.days == 5
    assert definition.plan == "5 days in Paris"

    trip_row = log_repo.get_trip(result.trip_id)
    plan_row = log_repo.get_plan(result.trip_id)
    assert trip_row.destination == "Paris" and trip_row.days == 5
    assert plan_row.plan == definition.plan
    assert plan_row.input_text == "Plan a 5-day trip to Paris."
    assert log_repo.message_exists(result.trip_id) is False


def test_create_trip_strips_destination_and_accepts_int_days(ctx):
    result = create_trip(ctx, "  Kyoto ", 3)
    assert result.destination == "Kyoto"
    assert result.days == 3


def test_each_creation_gets_a_fresh_identifier(ctx):
    ids = {create_trip(ctx, "Rome", 2).trip_id for _ in range(5)}
    assert len(ids) == 5


@pytest.mark.parametrize(
    ("destination", "days", "field"),
    [
        ("", 3, "destination"),
        ("   ", 3, "destination"),
        (None, 3, "destination"),
        ("Rome", None, "days"),
        ("Rome", "", "days"),
        ("Rome", "abc", "days"),
        ("Rome", "0", "days"),
        ("Rome", -2, "days"),
        ("Rome", 2.5, "days"),
        ("Rome", True, "days"),
        ("Rome", 5.0, "days"),
        (42, 3, "destination"),
        ("x" * 201, 3, "destination"),
    ],
)
def test_validation_errors_name_the_field_and_write_nothing(ctx, actors, log_repo, generation, destination, days, field):
    with pytest.raises(ValidationError) as exc_info:
        create_trip(ctx, destination, days)

    assert exc_info.value.field == field
    assert generation.plan_calls == []
    assert actors.list_ids() == []
    assert log_repo.list_trips() == []


def test_validate_days_parses_text():
    assert validate_days(" 7 ") == 7


class _FailingGeneration:
    backend = "failing"

    def create_plan(self, destination, days):
        raise RuntimeError("model unavailable")

    def generate(self, context, history, user_input):
        raise RuntimeError("model unavailable")


def test_generation_failure_aborts_before_any_write(make_ctx, actors, log_repo):
    ctx = make_ctx(generation=_FailingGeneration())
    with pytest.raises(GenerationError, match="model unavailable"):
        create_trip(ctx, "Paris", 5)
    assert actors.list_ids() == []
    assert log_repo.list_trips() == []


def test_generation_timeout_aborts_creation(make_ctx, actors, log_repo):
    release = threading.Event()

    class _StalledGeneration(_FailingGeneration):
        def create_plan(self, destination, days):
            release.wait(timeout=10)
            raise RuntimeError("too late")

    ctx = make_ctx(generation=_StalledGeneration(), generation_timeout_seconds=1)
    try:
        with pytest.raises(GenerationError, match="timed out"):
            create_trip(ctx, "Paris", 5)
    finally:
        release.set()
    assert actors.list_ids() == []
    assert log_repo.list_trips() == []


class _BrokenActorStorage(MemoryActorStorage):
    def store(self, trip_id, fields):
        raise ActorStorageError("actor storage offline")


def test_actor_init_failure_aborts_before_log_writes(make_ctx, log_repo):
    ctx = make_ctx(actors=TripActorRegistry(_BrokenActorStorage()))
    with pytest.raises(ActorInitError):
        create_trip(ctx, "Paris", 5)
    assert log_repo.list_trips() == []


class _TripRowFails(SQLiteConversationLogRepository):
    def insert_trip(self, record):
        raise PersistenceError("insert_trip failed: locked")


def test_trip_row_failure_leaves_initialized_actor(tmp_path, make_ctx, actors, log_output):
    repo = _TripRowFails(tmp_path / "log.sqlite3")
    ctx = make_ctx(log_repo=repo)

    with pytest.raises(PersistenceError):
        create_trip(ctx, "Paris", 5)

    # accepted inconsistency window: actor ahead of the log store
    [trip_id] = actors.list_ids()
    assert actors.get(trip_id).read().destination == "Paris"
    assert repo.get_plan(trip_id) is None

    events = [json.loads(line) for line in log_output.getvalue().splitlines()]
    assert any(e["event"] == "warning" and e["step"] == "insert_trip" for e in events)
    assert any(e["event"] == "error" and e["error_type"] == "PersistenceError" for e in events)


class _PlanRowFails(SQLiteConversationLogRepository):
    def insert_plan(self, record):
        raise PersistenceError("insert_plan failed")


def test_plan_row_failure_keeps_trip_row(tmp_path, make_ctx, actors):
    repo = _PlanRowFails(tmp_path / "log.sqlite3")
    ctx = make_ctx(log_repo=repo)

    with pytest.raises(PersistenceError):
        create_trip(ctx, "Paris", 5)

    [trip_id] = actors.list_ids()
    assert repo.trip_exists(trip_id)
    assert repo.get_plan(trip_id) is None


def test_creation_logs_start_and_end(ctx, log_output):
    result = create_trip(ctx, "Paris", 5)
    events = [json.loads(line) for line in log_output.getvalue().splitlines()]
    names = [e["event"] for e in events]
    assert names[0] == "step_start"
    assert "actor_initialized" in names
    assert names[-1] == "step_end"
    assert all(e["trace_id"] == "test" for e in events)
    assert events[-1]["trip_id"] == result.trip_id
