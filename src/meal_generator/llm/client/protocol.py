"""Generation client protocol definition.

Defines the interface every generation backend implements so the generation
service can be wired with a real, mock or unconfigured client at startup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from meal_generator.llm.models import LLMCompletionResult


@runtime_checkable
class GenerationClientProtocol(Protocol):
    """Protocol for generation client implementations.

    Key methods:
    - complete: one text completion, returned raw
    - initialize/shutdown: lifecycle management for connection pools
    """

    async def initialize(self) -> None:
        """Initialize client resources (HTTP connections, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a text completion.

        Args:
            prompt: User prompt text.
            system: Optional system prompt.
            options: Sampling options (temperature, max_tokens).

        Returns:
            LLMCompletionResult carrying the raw text.

        Raises:
            LLMUnavailableError: Service unreachable or timed out.
            LLMResponseError: HTTP error from service.
            LLMRateLimitError: Service rate limited the request.
            ConfigurationError: The client has no credentials.
        """
        ...
