"""Generation service integration.

Clients for the recipe generation service, the prompt that drives it and
the recovery of structured JSON from its free-form output.
"""

from meal_generator.llm.client import (
    GenerationClientProtocol,
    MockGenerationClient,
    OpenAIClient,
    UnconfiguredGenerationClient,
)
from meal_generator.llm.exceptions import (
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from meal_generator.llm.extraction import Parsed, Unparseable, extract_json
from meal_generator.llm.models import LLMCompletionResult
from meal_generator.llm.prompts import BasePrompt, MealGenerationPrompt


__all__ = [
    "BasePrompt",
    "GenerationClientProtocol",
    "LLMCompletionResult",
    "LLMError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
    "MealGenerationPrompt",
    "MockGenerationClient",
    "OpenAIClient",
    "Parsed",
    "UnconfiguredGenerationClient",
    "Unparseable",
    "extract_json",
]
