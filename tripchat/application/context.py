"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from tripchat.actors.storage import get_actor_storage
from tripchat.actors.trip_actor import TripActorRegistry
from tripchat.config.settings import ChatPolicy, Settings, load_settings
from tripchat.generation.service import get_generation_service
from tripchat.infrastructure.logging import get_logger
from tripchat.persistence.repository import get_log_repository


@dataclass
class AppContext:
    actors: TripActorRegistry
    log_repo: Any
    generation: Any
    chat_policy: ChatPolicy = field(default_factory=ChatPolicy)
    generation_timeout_seconds: int = 120
    logger: Any = None

    def get_logger(self) -> Any:
        return self.logger if self.logger is not None else get_logger()


def make_app_context(settings: Settings | None = None) -> AppContext:
    settings = settings or load_settings()
    return AppContext(
        actors=TripActorRegistry(get_actor_storage(settings), settings.reinit_policy),
        log_repo=get_log_repository(settings),
        generation=get_generation_service(),
        chat_policy=settings.chat_policy,
        generation_timeout_seconds=settings.generation_timeout_seconds,
        logger=get_logger(),
    )


__all__ = ["AppContext", "make_app_context"]
