"""Generation service: LLM-backed, or template mode when no key is configured."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from tripchat.domain.enums import MessageRole
from tripchat.domain.models import PlanDraft
from tripchat.generation.prompts import PLAN_SYSTEM_PROMPT, build_chat_system_prompt, build_plan_request
from tripchat.infrastructure.llm_factory import get_llm
from tripchat.persistence.models import MessageRecord
from tripchat.shared.exceptions import GenerationError


class GenerationService(Protocol):
    backend: str

    def create_plan(self, destination: str, days: int) -> PlanDraft: ...

    def generate(self, context: str, history: Sequence[MessageRecord], user_input: str) -> str: ...


def to_chat_messages(context: str, history: Sequence[MessageRecord], user_input: str) -> list[BaseMessage]:
    messages: list[BaseMessage] = [SystemMessage(content=build_chat_system_prompt(context))]
    for item in history:
        if item.role == MessageRole.ASSISTANT:
            messages.append(AIMessage(content=item.content))
        else:
            messages.append(HumanMessage(content=item.content))
    # non-bootstrap history already ends with user_input; both copies are kept
    messages.append(HumanMessage(content=user_input))
    return messages


def _content_text(response: Any) -> str:
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        # some providers return content blocks
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block) for block in content
        )
    return str(content or "").strip()


class LLMGenerationService:
    backend = "llm"

    def __init__(self, llm: Any) -> None:
        self._llm = llm

    def _invoke(self, messages: list[BaseMessage], purpose: str) -> str:
        try:
            response = self._llm.invoke(messages)
        except Exception as exc:
            raise GenerationError(f"{purpose} failed: {exc}") from exc
        text = _content_text(response)
        if not text:
            raise GenerationError(f"{purpose} returned empty text")
        return text

    def create_plan(self, destination: str, days: int) -> PlanDraft:
        request = build_plan_request(destination, days)
        plan = self._invoke(
            [SystemMessage(content=PLAN_SYSTEM_PROMPT), HumanMessage(content=request)],
            "create_plan",
        )
        return PlanDraft(plan_text=plan, input_text=request)

    def generate(self, context: str, history: Sequence[MessageRecord], user_input: str) -> str:
        return self._invoke(to_chat_messages(context, history, user_input), "generate")


class TemplateGenerationService:
    """Deterministic offline generator."""

    backend = "template"

    def create_plan(self, destination: str, days: int) -> PlanDraft:
        request = build_plan_request(destination, days)
        lines = [f"{days}-day plan for {destination}"]
        for day in range(1, days + 1):
            if day == 1:
                focus = f"arrive, settle in and take a first walk around central {destination}"
            elif day == days:
                focus = "revisit a favourite spot, pick up souvenirs and prepare to depart"
            else:
                focus = f"explore a different neighbourhood of {destination} and its local food"
            lines.append(f"Day {day}: {focus}.")
        return PlanDraft(plan_text="\n".join(lines), input_text=request)

    def generate(self, context: str, history: Sequence[MessageRecord], user_input: str) -> str:
        headline = context.splitlines()[0] if context else "your trip"
        return (
            f"Regarding {headline}: you asked \"{user_input.strip()}\". "
            f"Drawing on {len(history)} logged message(s), the plan above remains the reference."
        )


def get_generation_service() -> GenerationService:
    llm = get_llm()
    if llm is None:
        return TemplateGenerationService()
    return LLMGenerationService(llm)


__all__ = [
    "GenerationService",
    "LLMGenerationService",
    "TemplateGenerationService",
    "get_generation_service",
    "to_chat_messages",
]
