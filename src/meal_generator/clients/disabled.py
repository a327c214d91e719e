"""Lookup client selected when no lookup API key is configured."""

from __future__ import annotations

from typing import TYPE_CHECKING

from meal_generator.clients.exceptions import EnrichmentLookupError


if TYPE_CHECKING:
    from collections.abc import Sequence

    from meal_generator.schemas.enrichment import (
        IngredientInformation,
        ParsedIngredient,
    )


class DisabledLookupClient:
    """Lookup client with no backing service.

    The pipeline checks ``enabled`` and skips enrichment entirely; the
    lookup methods still fail loudly if called anyway.
    """

    @property
    def enabled(self) -> bool:
        return False

    async def initialize(self) -> None:
        return None

    async def shutdown(self) -> None:
        return None

    async def parse_ingredients(
        self,
        lines: Sequence[str],
    ) -> list[ParsedIngredient | None]:
        msg = "Ingredient lookup is not configured"
        raise EnrichmentLookupError(msg)

    async def resolve(
        self,
        ingredient_id: int | str,
        amount: float,
        unit: str,
    ) -> IngredientInformation:
        msg = "Ingredient lookup is not configured"
        raise EnrichmentLookupError(msg)
