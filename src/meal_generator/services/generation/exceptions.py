"""Generation stage exceptions."""

from __future__ import annotations

from meal_generator.core.exceptions import MealGeneratorError


class GenerationError(MealGeneratorError):
    """Base exception for generation stage errors. Always fatal for a run."""


class GenerationFormatError(GenerationError):
    """The generation output could not be salvaged into a recipe list."""

    def __init__(self, message: str, raw_text: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            raw_text: The untouched generation output, for diagnostics.
        """
        self.raw_text = raw_text
        super().__init__(message)


class GenerationUnavailableError(GenerationError):
    """The generation service could not be reached or returned an error."""
