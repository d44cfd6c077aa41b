"""Trip creation flow.

Order is fixed: generate the plan, initialize the trip actor, then write the
trip row and the plan row to the log store. Each step fails fast and nothing
already committed is rolled back, so a failure leaves a consistent prefix.
The actor's lock is held from init until the plan row is written.
"""

from __future__ import annotations

import uuid
from typing import Any

from tripchat.application.context import AppContext
from tripchat.application.contracts import CreateTripResult
from tripchat.application.timeouts import call_generation
from tripchat.domain.models import PlanDraft
from tripchat.persistence.models import PlanRecord, TripRecord
from tripchat.persistence.sqlite_repository import utc_now
from tripchat.shared.exceptions import PersistenceError, TripChatError, ValidationError


MAX_DESTINATION_LENGTH = 200


def validate_destination(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("destination", "Missing field: destination")
    if not isinstance(value, str):
        raise ValidationError("destination", "destination must be text")
    destination = value.strip()
    if len(destination) > MAX_DESTINATION_LENGTH:
        raise ValidationError("destination", f"destination exceeds {MAX_DESTINATION_LENGTH} characters")
    return destination


def validate_days(value: Any) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("days", "Missing field: days")
    if isinstance(value, bool) or isinstance(value, float):
        raise ValidationError("days", "days must be a positive integer")
    try:
        days = int(str(value).strip())
    except ValueError:
        raise ValidationError("days", "days must be a positive integer") from None
    if days <= 0:
        raise ValidationError("days", "days must be a positive integer")
    return days


def new_trip_id() -> str:
    return str(uuid.uuid4())


def create_trip(ctx: AppContext, destination: Any, days: Any) -> CreateTripResult:
    logger = ctx.get_logger()
    destination = validate_destination(destination)
    days = validate_days(days)
    trip_id = new_trip_id()

    logger.step_start("create_trip", trip_id=trip_id, destination=destination, days=days)
    step = "generate_plan"
    try:
        draft: PlanDraft = call_generation(
            ctx.generation.create_plan,
            destination,
            days,
            timeout=ctx.generation_timeout_seconds,
        )

        with ctx.actors.get(trip_id).exclusive() as actor:
            step = "actor_init"
            actor.init(destination, days, draft.plan_text)
            logger.event("actor_initialized", trip_id=trip_id)

            step = "insert_trip"
            try:
                ctx.log_repo.insert_trip(
                    TripRecord(trip_id=trip_id, destination=destination, days=days, created_at=utc_now())
                )
            except PersistenceError:
                logger.warning(step, "trip actor initialized without a log store row", trip_id=trip_id)
                raise

            step = "insert_plan"
            ctx.log_repo.insert_plan(
                PlanRecord(
                    trip_id=trip_id,
                    plan=draft.plan_text,
                    input_text=draft.input_text,
                    updated_at=utc_now(),
                )
            )
    except TripChatError as exc:
        logger.error(step, str(exc), trip_id=trip_id, error_type=type(exc).__name__)
        raise

    logger.step_end("create_trip", trip_id=trip_id)
    return CreateTripResult(trip_id=trip_id, destination=destination, days=days, plan=draft.plan_text)


__all__ = ["create_trip", "new_trip_id", "validate_days", "validate_destination"]
