"""Pydantic domain models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TripDefinition(BaseModel):
    """Canonical trip definition held by a trip actor."""

    destination: str = Field(min_length=1)
    days: int = Field(gt=0)
    plan: str = Field(min_length=1)


class PlanDraft(BaseModel):
    """Generated initial plan plus the prompt text it was produced from."""

    plan_text: str
    input_text: str
