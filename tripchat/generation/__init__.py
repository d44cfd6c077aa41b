"""Text generation backends."""

from tripchat.generation.service import (
    GenerationService,
    LLMGenerationService,
    TemplateGenerationService,
    get_generation_service,
)

__all__ = [
    "GenerationService",
    "LLMGenerationService",
    "TemplateGenerationService",
    "get_generation_service",
]
