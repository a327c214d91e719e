"""Ingredient lookup client protocol definition."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from meal_generator.schemas.enrichment import (
        IngredientInformation,
        ParsedIngredient,
    )


@runtime_checkable
class IngredientLookupProtocol(Protocol):
    """Protocol for ingredient lookup (enrichment) services.

    Two calls make up a lookup: ``parse_ingredients`` turns free-text lines
    into ``(id, amount, unit)`` triples and ``resolve`` fetches nutrition
    facts for one triple.
    """

    @property
    def enabled(self) -> bool:
        """Whether lookups can be made at all."""
        ...

    async def initialize(self) -> None:
        """Initialize client resources."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def parse_ingredients(
        self,
        lines: Sequence[str],
    ) -> list[ParsedIngredient | None]:
        """Parse free-text ingredient lines.

        Raises:
            EnrichmentLookupError: If the service call fails.
        """
        ...

    async def resolve(
        self,
        ingredient_id: int | str,
        amount: float,
        unit: str,
    ) -> IngredientInformation:
        """Fetch nutrition facts for one ingredient amount.

        Raises:
            EnrichmentLookupError: If the service call fails.
        """
        ...
