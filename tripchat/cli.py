"""tripchat CLI 入口：创建行程、对话、查看历史、对账"""

from __future__ import annotations

import argparse
import json
import sys

from dotenv import load_dotenv

from tripchat.application.chat_turn import chat_turn
from tripchat.application.context import AppContext, make_app_context
from tripchat.application.create_trip import create_trip
from tripchat.services.history_service import (
    NO_MESSAGES_YET,
    get_trip_definition,
    list_trip_messages,
    list_trips,
)
from tripchat.services.reconcile_service import reconcile
from tripchat.shared.exceptions import TripChatError, ValidationError


def _print_json(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _cmd_create(ctx: AppContext, args: argparse.Namespace) -> int:
    result = create_trip(ctx, args.destination, args.days)
    _print_json(result.model_dump())
    return 0


def _cmd_chat(ctx: AppContext, args: argparse.Namespace) -> int:
    if args.message:
        result = chat_turn(ctx, args.trip_id, " ".join(args.message))
        print(result.reply)
        return 0

    # 交互模式（多轮）
    while True:
        try:
            user_input = input("\nyou: ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not user_input:
            continue
        if user_input.lower() in ("quit", "exit", "q"):
            break
        result = chat_turn(ctx, args.trip_id, user_input)
        print("\n" + result.reply)
    return 0


def _cmd_show(ctx: AppContext, args: argparse.Namespace) -> int:
    definition = get_trip_definition(ctx=ctx, trip_id=args.trip_id)
    if definition is None:
        print("trip not initialized", file=sys.stderr)
        return 1
    _print_json({"trip_id": args.trip_id, **definition.model_dump()})
    return 0


def _cmd_history(ctx: AppContext, args: argparse.Namespace) -> int:
    messages = list_trip_messages(ctx=ctx, trip_id=args.trip_id)
    if not messages:
        print(NO_MESSAGES_YET)
        return 0
    _print_json([item.model_dump(mode="json") for item in messages])
    return 0


def _cmd_list(ctx: AppContext, args: argparse.Namespace) -> int:
    _print_json([item.model_dump() for item in list_trips(ctx=ctx, limit=args.limit)])
    return 0


def _cmd_reconcile(ctx: AppContext, args: argparse.Namespace) -> int:
    report = reconcile(ctx=ctx, repair=args.repair)
    _print_json(report.model_dump())
    return 0


def _cmd_serve(_ctx: AppContext | None, args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("tripchat.api.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tripchat", description="Trip planning conversations")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="generate a plan and create a trip")
    create.add_argument("destination")
    create.add_argument("days")
    create.set_defaults(handler=_cmd_create)

    chat = sub.add_parser("chat", help="send a message (interactive without one)")
    chat.add_argument("trip_id")
    chat.add_argument("message", nargs="*")
    chat.set_defaults(handler=_cmd_chat)

    show = sub.add_parser("show", help="print the trip definition held by the trip actor")
    show.add_argument("trip_id")
    show.set_defaults(handler=_cmd_show)

    history = sub.add_parser("history", help="print the logged conversation")
    history.add_argument("trip_id")
    history.set_defaults(handler=_cmd_history)

    listing = sub.add_parser("list", help="list trips from the log store")
    listing.add_argument("--limit", type=int, default=20)
    listing.set_defaults(handler=_cmd_list)

    sweep = sub.add_parser("reconcile", help="find trips whose log store rows are missing")
    sweep.add_argument("--repair", action="store_true", help="backfill missing trip and plan rows")
    sweep.set_defaults(handler=_cmd_reconcile)

    serve = sub.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(handler=_cmd_serve, needs_ctx=False)

    return parser


def main(argv: list[str] | None = None, ctx: AppContext | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    if getattr(args, "needs_ctx", True) and ctx is None:
        ctx = make_app_context()
    try:
        return args.handler(ctx, args)
    except ValidationError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except TripChatError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
