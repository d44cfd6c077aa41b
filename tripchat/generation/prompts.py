"""Prompt templates for plan creation and follow-up chat."""

from __future__ import annotations

PLAN_SYSTEM_PROMPT = (
    "You are an experienced travel planner. Write a practical day-by-day itinerary. "
    "Use one heading per day (Day 1, Day 2, ...) with morning, afternoon and evening suggestions, "
    "and finish with a short list of practical tips."
)

PLAN_REQUEST_TEMPLATE = "Plan a {days}-day trip to {destination}."

CHAT_SYSTEM_PROMPT = (
    "You are a travel assistant helping a traveller refine an existing trip plan. "
    "Answer questions about the plan below, keep suggestions consistent with it, "
    "and be concise.\n\n"
    "Current trip plan:\n{plan}"
)


def build_plan_request(destination: str, days: int) -> str:
    return PLAN_REQUEST_TEMPLATE.format(destination=destination, days=days)


def build_chat_system_prompt(plan: str) -> str:
    return CHAT_SYSTEM_PROMPT.format(plan=plan)
