"""Ingredient lookup client exceptions."""

from __future__ import annotations

from meal_generator.core.exceptions import MealGeneratorError


class EnrichmentLookupError(MealGeneratorError):
    """A single ingredient parse or lookup failed.

    Never fatal: the affected ingredient simply contributes no nutrition.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
