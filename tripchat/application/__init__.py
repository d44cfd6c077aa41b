"""Application layer: trip creation and chat turn orchestration."""

from tripchat.application.chat_turn import chat_turn
from tripchat.application.context import AppContext, make_app_context
from tripchat.application.contracts import ChatTurnResult, CreateTripResult
from tripchat.application.create_trip import create_trip

__all__ = [
    "AppContext",
    "ChatTurnResult",
    "CreateTripResult",
    "chat_turn",
    "create_trip",
    "make_app_context",
]
