"""Generation client selected when no API key is configured."""

from __future__ import annotations

from typing import Any

from meal_generator.core.exceptions import ConfigurationError
from meal_generator.llm.models import LLMCompletionResult


class UnconfiguredGenerationClient:
    """Generation client that fails every call with ``ConfigurationError``.

    Lets the service start (and serve cached recipes) without credentials;
    only a run that actually needs generation fails.
    """

    def __init__(self, missing: str = "OPENAI_API_KEY") -> None:
        self.missing = missing

    async def initialize(self) -> None:
        return None

    async def shutdown(self) -> None:
        return None

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        msg = f"{self.missing} missing in environment"
        raise ConfigurationError(msg)
