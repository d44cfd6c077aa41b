"""Structured logger and redaction."""

from __future__ import annotations

import io
import json
from types import SimpleNamespace

from tripchat.infrastructure.logging import StructuredLogger
from tripchat.infrastructure.redact import redact_sensitive


def test_events_are_json_lines_with_trace_id():
    out = io.StringIO()
    logger = StructuredLogger(trace_id="abc", output=out)

    logger.step_start("chat_turn", trip_id="t1")
    logger.event("chat_bootstrap", trip_id="t1", reply_persisted=False)
    logger.step_end("chat_turn", trip_id="t1")

    events = [json.loads(line) for line in out.getvalue().splitlines()]
    assert [e["event"] for e in events] == ["step_start", "chat_bootstrap", "step_end"]
    assert all(e["trace_id"] == "abc" for e in events)
    assert events[2]["duration_ms"] >= 0


def test_secrets_are_redacted_in_log_lines():
    out = io.StringIO()
    StructuredLogger(trace_id="abc", output=out).error("generate", "auth failed for sk-abcdefghijklmnop")
    assert "sk-abcdefghijklmnop" not in out.getvalue()
    assert "***REDACTED***" in out.getvalue()


def test_redact_patterns():
    assert "secret123" not in redact_sensitive("api_key=secret123&x=1")
    assert "tok.en" not in redact_sensitive("Authorization: Bearer tok.en")
    assert redact_sensitive("redis://user:pw@cache:6379/0") == "redis://***REDACTED***@cache:6379/0"
    assert redact_sensitive("plain text") == "plain text"
    assert redact_sensitive("") == ""


def test_interleaved_steps_on_different_trips_time_separately(monkeypatch):
    clock = {"now": 100.0}
    monkeypatch.setattr("tripchat.infrastructure.logging.time", SimpleNamespace(time=lambda: clock["now"]))
    out = io.StringIO()
    logger = StructuredLogger(trace_id="abc", output=out)

    logger.step_start("create_trip", trip_id="t1")
    clock["now"] = 105.0
    logger.step_start("create_trip", trip_id="t2")
    clock["now"] = 110.0
    logger.step_end("create_trip", trip_id="t1")
    clock["now"] = 111.0
    logger.step_end("create_trip", trip_id="t2")

    ends = [json.loads(line) for line in out.getvalue().splitlines() if '"step_end"' in line]
    assert [(e["trip_id"], e["duration_ms"]) for e in ends] == [("t1", 10000.0), ("t2", 6000.0)]
