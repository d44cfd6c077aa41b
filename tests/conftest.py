"""pytest 全局 fixtures：测试环境隔离"""

from __future__ import annotations

import io
import threading

import pytest

from tripchat.actors.storage import MemoryActorStorage
from tripchat.actors.trip_actor import TripActorRegistry
from tripchat.application.context import AppContext
from tripchat.config.settings import ChatPolicy
from tripchat.domain.models import PlanDraft
from tripchat.infrastructure.logging import StructuredLogger
from tripchat.persistence.sqlite_repository import SQLiteConversationLogRepository

_ENV_VARS = (
    "DASHSCOPE_API_KEY",
    "OPENAI_API_KEY",
    "LLM_API_KEY",
    "LLM_MODEL",
    "LLM_BASE_URL",
    "REDIS_URL",
    "LOG_STORE_ENABLED",
    "LOG_STORE_DB",
    "ACTOR_STORAGE_BACKEND",
    "ACTOR_STORAGE_DB",
    "ACTOR_REINIT_POLICY",
    "CHAT_HISTORY_CHECK",
    "CHAT_BOOTSTRAP_REPLY",
    "CHAT_SERIALIZE_TURNS",
    "GENERATION_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def no_real_apis(monkeypatch):
    """默认禁用真实 LLM 与外部存储，确保测试不依赖外部服务"""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    from tripchat.infrastructure.llm_factory import reset_llm

    reset_llm()
    yield
    reset_llm()


class FakeGeneration:
    backend = "fake"

    def __init__(self) -> None:
        self.plan_calls: list[tuple[str, int]] = []
        self.generate_calls: list[tuple[str, list, str]] = []
        self._lock = threading.Lock()

    def create_plan(self, destination: str, days: int) -> PlanDraft:
        with self._lock:
            self.plan_calls.append((destination, days))
        return PlanDraft(
            plan_text=f"{days} days in {destination}",
            input_text=f"Plan a {days}-day trip to {destination}.",
        )

    def generate(self, context: str, history, user_input: str) -> str:
        with self._lock:
            self.generate_calls.append((context, list(history), user_input))
            count = len(self.generate_calls)
        return f"reply {count}: {user_input}"


@pytest.fixture
def generation() -> FakeGeneration:
    return FakeGeneration()


@pytest.fixture
def log_repo(tmp_path) -> SQLiteConversationLogRepository:
    return SQLiteConversationLogRepository(tmp_path / "trip_planner.sqlite3")


@pytest.fixture
def actors() -> TripActorRegistry:
    return TripActorRegistry(MemoryActorStorage())


@pytest.fixture
def log_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_ctx(actors, log_repo, generation, log_output):
    def _make(**overrides) -> AppContext:
        kwargs = {
            "actors": actors,
            "log_repo": log_repo,
            "generation": generation,
            "chat_policy": ChatPolicy(),
            "generation_timeout_seconds": 0,
            "logger": StructuredLogger(trace_id="test", output=log_output),
        }
        kwargs.update(overrides)
        return AppContext(**kwargs)

    return _make


@pytest.fixture
def ctx(make_ctx) -> AppContext:
    return make_ctx()
