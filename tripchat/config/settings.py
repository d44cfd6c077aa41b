"""Runtime settings resolved from the environment."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from tripchat.domain.enums import BootstrapReply, HistoryCheck, ReinitPolicy

_TRUTHY = {"1", "true", "yes", "on"}
_DEFAULT_LOG_STORE_DB = Path("data") / "trip_planner.sqlite3"
_DEFAULT_ACTOR_DB = Path("data") / "trip_actors.sqlite3"


def _is_enabled(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _path_from_env(name: str, default: Path) -> Path:
    raw = os.getenv(name, "").strip()
    return Path(raw) if raw else default


def _enum_from_env(name: str, enum_cls, default):
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    try:
        return enum_cls(raw)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in enum_cls)
        raise ValueError(f"{name}={raw!r} is not one of: {allowed}") from exc


class ChatPolicy(BaseModel):
    history_check: HistoryCheck = HistoryCheck.BEFORE_APPEND
    bootstrap_reply: BootstrapReply = BootstrapReply.WITHHOLD
    serialize_turns: bool = True


class Settings(BaseModel):
    log_store_enabled: bool = True
    log_store_db: Path = Field(default=_DEFAULT_LOG_STORE_DB)
    actor_storage_backend: str = "sqlite"
    actor_storage_db: Path = Field(default=_DEFAULT_ACTOR_DB)
    redis_url: str = ""
    reinit_policy: ReinitPolicy = ReinitPolicy.OVERWRITE
    chat_policy: ChatPolicy = Field(default_factory=ChatPolicy)
    generation_timeout_seconds: int = 120


def load_chat_policy() -> ChatPolicy:
    return ChatPolicy(
        history_check=_enum_from_env("CHAT_HISTORY_CHECK", HistoryCheck, HistoryCheck.BEFORE_APPEND),
        bootstrap_reply=_enum_from_env("CHAT_BOOTSTRAP_REPLY", BootstrapReply, BootstrapReply.WITHHOLD),
        serialize_turns=_is_enabled("CHAT_SERIALIZE_TURNS", default=True),
    )


def load_settings() -> Settings:
    return Settings(
        log_store_enabled=_is_enabled("LOG_STORE_ENABLED", default=True),
        log_store_db=_path_from_env("LOG_STORE_DB", _DEFAULT_LOG_STORE_DB),
        actor_storage_backend=os.getenv("ACTOR_STORAGE_BACKEND", "sqlite").strip().lower() or "sqlite",
        actor_storage_db=_path_from_env("ACTOR_STORAGE_DB", _DEFAULT_ACTOR_DB),
        redis_url=os.getenv("REDIS_URL", "").strip(),
        reinit_policy=_enum_from_env("ACTOR_REINIT_POLICY", ReinitPolicy, ReinitPolicy.OVERWRITE),
        chat_policy=load_chat_policy(),
        generation_timeout_seconds=int(os.getenv("GENERATION_TIMEOUT_SECONDS", "120")),
    )


__all__ = ["ChatPolicy", "Settings", "load_chat_policy", "load_settings"]
