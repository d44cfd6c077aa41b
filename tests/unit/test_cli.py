"""CLI commands against an injected context."""

from __future__ import annotations

import json

from tripchat.cli import main


def test_create_show_chat_history(ctx, capsys):
    assert main(["create", "Paris", "5"], ctx=ctx) == 0
    created = json.loads(capsys.readouterr().out)
    trip_id = created["trip_id"]
    assert created["destination"] == "Paris"

    assert main(["history", trip_id], ctx=ctx) == 0
    assert capsys.readouterr().out.strip() == "No messages yet"

    assert main(["show", trip_id], ctx=ctx) == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["days"] == 5

    assert main(["chat", trip_id, "What's", "day", "1?"], ctx=ctx) == 0
    assert "What's day 1?" in capsys.readouterr().out

    assert main(["history", trip_id], ctx=ctx) == 0
    history = json.loads(capsys.readouterr().out)
    assert [item["role"] for item in history] == ["user"]


def test_validation_error_exit_code(ctx, capsys):
    assert main(["create", "Paris", "zero"], ctx=ctx) == 2
    assert "days" in capsys.readouterr().err


def test_show_unknown_trip(ctx, capsys):
    assert main(["show", "missing"], ctx=ctx) == 1
    assert "not initialized" in capsys.readouterr().err


def test_chat_unknown_trip_is_error(ctx, capsys):
    assert main(["chat", "missing", "hello"], ctx=ctx) == 1
    assert "missing" in capsys.readouterr().err


def test_list_and_reconcile(ctx, capsys):
    main(["create", "Oslo", "2"], ctx=ctx)
    capsys.readouterr()

    assert main(["list", "--limit", "5"], ctx=ctx) == 0
    listed = json.loads(capsys.readouterr().out)
    assert [item["destination"] for item in listed] == ["Oslo"]

    assert main(["reconcile"], ctx=ctx) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["scanned"] == 1
