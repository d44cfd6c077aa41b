"""Infrastructure services and cross-cutting utilities."""

from tripchat.infrastructure.llm_factory import get_llm, is_llm_available, reset_llm
from tripchat.infrastructure.logging import StructuredLogger, get_logger
from tripchat.infrastructure.redact import redact_sensitive

__all__ = [
    "StructuredLogger",
    "get_llm",
    "get_logger",
    "is_llm_available",
    "redact_sensitive",
    "reset_llm",
]
