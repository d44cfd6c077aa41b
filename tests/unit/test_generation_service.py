"""Generation backends: template mode and LLM message construction."""

from __future__ import annotations

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from tripchat.domain.enums import MessageRole
from tripchat.generation.service import (
    LLMGenerationService,
    TemplateGenerationService,
    get_generation_service,
    to_chat_messages,
)
from tripchat.infrastructure.llm_factory import reset_llm, resolve_llm_provider
from tripchat.persistence.models import MessageRecord
from tripchat.shared.exceptions import GenerationError


def _msg(i: int, content: str, role: MessageRole) -> MessageRecord:
    return MessageRecord(message_id=i, trip_id="t1", content=content, role=role, created_at="2026-10-01T00:00:00+00:00")


class _FakeLLM:
    def __init__(self, content="a reply", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[list] = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.content)


def test_template_plan_has_one_line_per_day():
    draft = TemplateGenerationService().create_plan("Lisbon", 3)
    lines = draft.plan_text.splitlines()
    assert lines[0] == "3-day plan for Lisbon"
    assert [line.split(":")[0] for line in lines[1:]] == ["Day 1", "Day 2", "Day 3"]
    assert draft.input_text == "Plan a 3-day trip to Lisbon."


def test_template_reply_is_deterministic():
    service = TemplateGenerationService()
    first = service.generate("3-day plan for Lisbon\nDay 1: ...", [], "What's day 1?")
    second = service.generate("3-day plan for Lisbon\nDay 1: ...", [], "What's day 1?")
    assert first == second
    assert "What's day 1?" in first


def test_chat_messages_keep_history_order_and_roles():
    history = [
        _msg(1, "q1", MessageRole.USER),
        _msg(2, "a1", MessageRole.ASSISTANT),
        _msg(3, "q2", MessageRole.USER),
    ]
    messages = to_chat_messages("Day 1: Louvre", history, "q2")

    assert isinstance(messages[0], SystemMessage)
    assert "Day 1: Louvre" in messages[0].content
    assert [type(m) for m in messages[1:]] == [HumanMessage, AIMessage, HumanMessage, HumanMessage]
    assert [m.content for m in messages[1:]] == ["q1", "a1", "q2", "q2"]


def test_llm_create_plan_records_request_text():
    llm = _FakeLLM(content="Day 1: Colosseum")
    draft = LLMGenerationService(llm).create_plan("Rome", 2)
    assert draft.plan_text == "Day 1: Colosseum"
    assert draft.input_text == "Plan a 2-day trip to Rome."
    system, human = llm.calls[0]
    assert isinstance(system, SystemMessage)
    assert human.content == "Plan a 2-day trip to Rome."


def test_llm_content_blocks_are_joined():
    llm = _FakeLLM(content=[{"type": "text", "text": "Day 1"}, {"type": "text", "text": ": museum"}])
    assert LLMGenerationService(llm).generate("plan", [], "hi") == "Day 1: museum"


def test_llm_failure_is_generation_error():
    service = LLMGenerationService(_FakeLLM(error=TimeoutError("read timed out")))
    with pytest.raises(GenerationError, match="read timed out"):
        service.generate("plan", [], "hi")


def test_llm_empty_output_is_generation_error():
    service = LLMGenerationService(_FakeLLM(content="   "))
    with pytest.raises(GenerationError, match="empty"):
        service.create_plan("Rome", 2)


def test_template_mode_without_keys():
    assert resolve_llm_provider() == "template"
    assert isinstance(get_generation_service(), TemplateGenerationService)


def test_llm_mode_with_openai_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-not-a-real-key")
    reset_llm()
    assert resolve_llm_provider() == "openai"
    assert isinstance(get_generation_service(), LLMGenerationService)
