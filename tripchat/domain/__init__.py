"""Domain types for trips and conversations."""

from tripchat.domain.enums import ActorState, BootstrapReply, HistoryCheck, MessageRole, ReinitPolicy
from tripchat.domain.models import PlanDraft, TripDefinition

__all__ = [
    "ActorState",
    "BootstrapReply",
    "HistoryCheck",
    "MessageRole",
    "PlanDraft",
    "ReinitPolicy",
    "TripDefinition",
]
