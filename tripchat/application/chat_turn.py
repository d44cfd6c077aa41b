"""Chat turn flow.

A turn appends the user's message to the log store, reads the trip
definition from the trip actor, and asks the generation backend for a reply.
Three policy switches (see ``ChatPolicy``) decide:

* whether the "any history yet?" check runs before or after the user message
  is appended. Checked after, the bootstrap branch is reachable only through
  a race, since the check always sees the message just written;
* whether the reply on a bootstrap turn is appended as an assistant message;
* whether the whole turn runs under the trip actor's lock, which keeps two
  turns on the same trip from interleaving their appends.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any

from tripchat.application.context import AppContext
from tripchat.application.contracts import ChatTurnResult
from tripchat.application.timeouts import call_generation
from tripchat.domain.enums import BootstrapReply, HistoryCheck, MessageRole
from tripchat.shared.exceptions import TripChatError, TripNotFoundError, ValidationError


MAX_MESSAGE_LENGTH = 4000


def validate_message(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("message", "Missing field: message")
    if not isinstance(value, str):
        raise ValidationError("message", "message must be text")
    if len(value) > MAX_MESSAGE_LENGTH:
        raise ValidationError("message", f"message exceeds {MAX_MESSAGE_LENGTH} characters")
    return value


def _run_turn(ctx: AppContext, trip_id: str, message: str, logger: Any) -> ChatTurnResult:
    policy = ctx.chat_policy
    repo = ctx.log_repo

    if policy.history_check is HistoryCheck.BEFORE_APPEND:
        has_history = repo.message_exists(trip_id)
        repo.insert_message(trip_id, message, MessageRole.USER)
    else:
        repo.insert_message(trip_id, message, MessageRole.USER)
        has_history = repo.message_exists(trip_id)

    trip = ctx.actors.get(trip_id).read()
    if trip is None:
        raise TripNotFoundError(trip_id)

    if not has_history:
        reply = call_generation(
            ctx.generation.generate,
            trip.plan,
            [],
            message,
            timeout=ctx.generation_timeout_seconds,
        )
        persist = policy.bootstrap_reply is BootstrapReply.PERSIST
        if persist:
            repo.insert_message(trip_id, reply, MessageRole.ASSISTANT)
        logger.event("chat_bootstrap", trip_id=trip_id, reply_persisted=persist)
        return ChatTurnResult(trip_id=trip_id, reply=reply, bootstrap=True, reply_persisted=persist)

    history = repo.list_messages(trip_id)
    reply = call_generation(
        ctx.generation.generate,
        trip.plan,
        history,
        message,
        timeout=ctx.generation_timeout_seconds,
    )
    repo.insert_message(trip_id, reply, MessageRole.ASSISTANT)
    return ChatTurnResult(trip_id=trip_id, reply=reply, bootstrap=False, reply_persisted=True)


def chat_turn(ctx: AppContext, trip_id: str, message: Any) -> ChatTurnResult:
    logger = ctx.get_logger()
    message = validate_message(message)

    logger.step_start("chat_turn", trip_id=trip_id)
    gate = ctx.actors.get(trip_id).exclusive() if ctx.chat_policy.serialize_turns else nullcontext()
    try:
        with gate:
            result = _run_turn(ctx, trip_id, message, logger)
    except TripChatError as exc:
        logger.error("chat_turn", str(exc), trip_id=trip_id, error_type=type(exc).__name__)
        raise

    logger.step_end("chat_turn", trip_id=trip_id, bootstrap=result.bootstrap)
    return result


__all__ = ["chat_turn", "validate_message"]
