"""Nutrition aggregation with fallback to generator estimates.

Sums looked-up nutrients per recipe. When the lookups produced nothing
usable (all failed, or every category summed to zero) the recipe keeps the
generator's own estimates instead.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from meal_generator.observability.logging import get_logger
from meal_generator.schemas.recipe import (
    EnrichedRecipe,
    NutritionSource,
    NutritionTotals,
    ParsedIngredientLine,
    Provenance,
    RecipeNutrition,
)
from meal_generator.services.nutrition.constants import (
    NUTRIENT_CATEGORIES,
    NUTRIENT_SUBSTRINGS,
)


if TYPE_CHECKING:
    from collections.abc import Sequence

    from meal_generator.schemas.enrichment import (
        IngredientInformation,
        ParsedIngredient,
    )
    from meal_generator.schemas.recipe import CandidateRecipe

logger = get_logger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero, floored at 0."""
    rounded = Decimal(str(value)).to_integral_value(rounding=ROUND_HALF_UP)
    return max(0, int(rounded))


def classify_nutrient(name: str) -> str | None:
    """Map a free-form nutrient name to a category, or None to ignore it."""
    lowered = name.lower()
    for substring, category in NUTRIENT_SUBSTRINGS:
        if substring in lowered:
            return category
    return None


class NutritionAggregator:
    """Turns candidate recipes plus lookup results into enriched recipes."""

    def sum_nutrients(
        self,
        infos: Sequence[IngredientInformation | None],
    ) -> dict[str, float]:
        """Sum nutrient amounts per category across all resolved lookups."""
        totals = dict.fromkeys(NUTRIENT_CATEGORIES, 0.0)
        for info in infos:
            if info is None:
                continue
            for nutrient in info.nutrients:
                category = classify_nutrient(nutrient.name)
                if category is not None:
                    totals[category] += nutrient.amount
        return totals

    def aggregate(
        self,
        recipe: CandidateRecipe,
        infos: Sequence[IngredientInformation | None],
        servings: int,
        parsed: Sequence[ParsedIngredient | None] = (),
    ) -> EnrichedRecipe:
        """Attach totals and per-serving nutrition to ``recipe``.

        Args:
            recipe: Candidate recipe from the generation stage.
            infos: Lookup results for the recipe's ingredients; None entries
                are failed or skipped lookups.
            servings: Servings the totals are divided by (at least 1).
            parsed: The lookup service's parse of the ingredient lines,
                attached to the recipe as-is.

        Returns:
            The recipe with ``nutrition`` and ``provenance`` set.
        """
        summed = self.sum_nutrients(infos)

        if sum(summed.values()) > 0:
            source = NutritionSource.ENRICHED
            provenance = Provenance.GENERATION_ENRICHMENT
        else:
            summed = {
                "calories": recipe.estimated_calories,
                "protein": recipe.macros.protein,
                "carbs": recipe.macros.carbs,
                "fat": recipe.macros.fat,
            }
            source = NutritionSource.ESTIMATED
            provenance = Provenance.GENERATION
            if any(info is not None for info in infos):
                logger.debug(
                    "Lookups yielded no nutrients, using estimates",
                    title=recipe.title,
                )

        divisor = max(1, servings)
        totals = NutritionTotals(
            **{category: round_half_up(summed[category]) for category in NUTRIENT_CATEGORIES}
        )
        per_serving = NutritionTotals(
            **{
                category: round_half_up(getattr(totals, category) / divisor)
                for category in NUTRIENT_CATEGORIES
            }
        )

        return EnrichedRecipe(
            **recipe.model_dump(),
            nutrition=RecipeNutrition(
                totals=totals,
                per_serving=per_serving,
                source=source,
            ),
            provenance=provenance,
            parsed_ingredients=[
                ParsedIngredientLine(
                    id=item.id, name=item.name, amount=item.amount, unit=item.unit
                )
                for item in parsed
                if item is not None
            ],
        )
