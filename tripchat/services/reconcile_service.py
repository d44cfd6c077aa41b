"""Reconciliation sweep between trip actors and the log store.

Creation initializes the actor before writing the trip and plan rows, so a
crash or store failure in between leaves an initialized actor with no log
store mirror. The sweep finds those trips and can backfill the missing rows
from the actor's definition.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tripchat.application.context import AppContext
from tripchat.persistence.models import PlanRecord, TripRecord
from tripchat.persistence.sqlite_repository import utc_now

_BACKFILL_INPUT_TEXT = "backfilled from trip actor"


class ReconcileReport(BaseModel):
    scanned: int = 0
    missing_trip_rows: list[str] = Field(default_factory=list)
    missing_plan_rows: list[str] = Field(default_factory=list)
    repaired: list[str] = Field(default_factory=list)


def _check_and_repair(ctx: AppContext, trip_id: str, report: ReconcileReport, repair: bool, logger) -> None:
    with ctx.actors.get(trip_id).exclusive() as actor:
        definition = actor.read()
        if definition is None:
            return
        report.scanned += 1

        missing_trip = not ctx.log_repo.trip_exists(trip_id)
        missing_plan = ctx.log_repo.get_plan(trip_id) is None
        if missing_trip:
            report.missing_trip_rows.append(trip_id)
        if missing_plan:
            report.missing_plan_rows.append(trip_id)
        if not repair or not (missing_trip or missing_plan):
            return

        # trip row before plan row, same as creation
        if missing_trip:
            ctx.log_repo.insert_trip(
                TripRecord(
                    trip_id=trip_id,
                    destination=definition.destination,
                    days=definition.days,
                    created_at=utc_now(),
                )
            )
        if missing_plan:
            ctx.log_repo.insert_plan(
                PlanRecord(
                    trip_id=trip_id,
                    plan=definition.plan,
                    input_text=_BACKFILL_INPUT_TEXT,
                    updated_at=utc_now(),
                )
            )
    report.repaired.append(trip_id)
    logger.event("reconcile_repaired", trip_id=trip_id, trip_row=missing_trip, plan_row=missing_plan)


def reconcile(*, ctx: AppContext, repair: bool = False) -> ReconcileReport:
    """Compare every stored actor with its log store rows.

    Each trip is checked under its actor's lock, so a creation still writing
    its rows is waited for rather than reported.
    """
    logger = ctx.get_logger()
    report = ReconcileReport()

    for trip_id in ctx.actors.list_ids():
        _check_and_repair(ctx, trip_id, report, repair, logger)

    logger.event(
        "reconcile_summary",
        scanned=report.scanned,
        missing_trip_rows=len(report.missing_trip_rows),
        missing_plan_rows=len(report.missing_plan_rows),
        repaired=len(report.repaired),
    )
    return report


__all__ = ["ReconcileReport", "reconcile"]
