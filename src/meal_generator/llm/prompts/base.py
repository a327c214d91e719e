"""Base class for generation prompts.

Provides a standardized interface for defining prompts with:
- Typed input variables
- A target output schema
- Model-specific configuration
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel


class BasePrompt[T: BaseModel](ABC):
    """Base class for all generation prompts.

    Centralizes prompt definitions so the wording lives in one place, can be
    tested on its own, and carries its own sampling options.

    Example:
        ```python
        class SnackPrompt(BasePrompt[GeneratedRecipes]):
            output_schema = GeneratedRecipes
            system_prompt = "You are a snack planner."

            def format(self, **kwargs: Any) -> str:
                return f"Pantry: {kwargs['pantry']}"
        ```
    """

    # Override in subclasses
    output_schema: ClassVar[type[BaseModel]]
    """Pydantic model the output is validated against."""

    system_prompt: ClassVar[str | None] = None
    """Optional system prompt to set context for the model."""

    temperature: ClassVar[float] = 0.1
    """Temperature for generation (low = more deterministic)."""

    max_tokens: ClassVar[int | None] = None
    """Maximum tokens to generate (None = model default)."""

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Format the prompt template with input variables.

        Raises:
            ValueError: If required variables are missing.
        """
        ...

    @property
    def name(self) -> str:
        """Prompt identifier for logging."""
        return self.__class__.__name__

    def get_options(self) -> dict[str, Any]:
        """Sampling options to pass to the generation client."""
        options: dict[str, Any] = {"temperature": self.temperature}
        if self.max_tokens is not None:
            options["max_tokens"] = self.max_tokens
        return options
