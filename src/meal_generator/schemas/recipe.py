"""Recipe schemas.

``CandidateRecipe`` models the generation service's output. That output is
untrusted: every field is optional and malformed values are defaulted to
zero/empty instead of failing validation. ``EnrichedRecipe`` is the same
recipe with the resolved nutrition attached.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, field_validator, model_validator

from meal_generator.schemas.base import APIResponse, DownstreamResponse


_LEADING_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

# Magnitudes at or above this are not nutrition values; treated as unusable
MAX_PLAUSIBLE_NUMBER = 1e9


def coerce_number(value: Any) -> float:
    """Best-effort numeric conversion; anything unusable becomes 0.

    Strings like ``"480 kcal"`` or ``"22g"`` yield their leading number.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        match = _LEADING_NUMBER.search(value)
        value = float(match.group()) if match else 0.0
    # NaN and infinities fail the comparison too
    if isinstance(value, (int, float)) and abs(value) < MAX_PLAUSIBLE_NUMBER:
        return float(value)
    return 0.0


def coerce_text(value: Any) -> str:
    """Best-effort text conversion; non-scalars become an empty string."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return f"{value:g}"
    return ""


Number = Annotated[float, BeforeValidator(coerce_number)]
Text = Annotated[str, BeforeValidator(coerce_text)]


class NutritionSource(StrEnum):
    """Where a recipe's nutrition figures came from."""

    ENRICHED = "enriched"
    ESTIMATED = "estimated"


class Provenance(StrEnum):
    """Which pipeline stages contributed to a recipe."""

    GENERATION = "generation"
    GENERATION_ENRICHMENT = "generation+enrichment"


class Macros(DownstreamResponse):
    """Generator-estimated macronutrients, in grams."""

    protein: Number = 0.0
    carbs: Number = 0.0
    fat: Number = 0.0


class RecipeIngredient(DownstreamResponse):
    """One ingredient line of a generated recipe."""

    name: Text = ""
    quantity: Text = ""

    def as_line(self) -> str:
        """Render as a free-text ingredient line, e.g. ``"1 cup rice"``."""
        return f"{self.quantity} {self.name}".strip()


class CandidateRecipe(DownstreamResponse):
    """A recipe as produced by the generation stage, pre-enrichment."""

    title: Text = ""
    description: Text = ""
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    steps: list[Text] = Field(default_factory=list)
    estimated_calories: Number = 0.0
    macros: Macros = Field(default_factory=Macros)

    @model_validator(mode="before")
    @classmethod
    def _accept_calories_synonym(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if (
            data.get("estimatedCalories") is None
            and data.get("estimated_calories") is None
            and "calories" in data
        ):
            data = {**data, "estimatedCalories": data["calories"]}
        return data

    @field_validator("ingredients", mode="before")
    @classmethod
    def _salvage_ingredients(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        salvaged: list[Any] = []
        for item in value:
            if isinstance(item, (dict, RecipeIngredient)):
                salvaged.append(item)
            elif isinstance(item, str) and item.strip():
                salvaged.append({"name": item})
        return salvaged

    @field_validator("steps", mode="before")
    @classmethod
    def _salvage_steps(cls, value: Any) -> list[Any]:
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            return []
        return [step for step in value if isinstance(step, (str, int, float))]

    @field_validator("macros", mode="before")
    @classmethod
    def _salvage_macros(cls, value: Any) -> Any:
        if isinstance(value, (dict, Macros)):
            return value
        return {}


class GeneratedRecipes(DownstreamResponse):
    """Top-level envelope the generation service is asked to return."""

    recipes: list[CandidateRecipe] = Field(default_factory=list)

    @field_validator("recipes", mode="before")
    @classmethod
    def _drop_non_objects(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item for item in value if isinstance(item, (dict, CandidateRecipe))]
        return value


class NutritionTotals(APIResponse):
    """Rounded nutrient totals; calories in kcal, macros in grams."""

    calories: int = Field(default=0, ge=0)
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fat: int = Field(default=0, ge=0)


class RecipeNutrition(APIResponse):
    """Whole-recipe and per-serving nutrition with its source."""

    totals: NutritionTotals
    per_serving: NutritionTotals
    source: NutritionSource


class ParsedIngredientLine(APIResponse):
    """An ingredient line as decomposed by the lookup service."""

    id: int | str | None = None
    name: str = ""
    amount: float | None = None
    unit: str = ""


class EnrichedRecipe(CandidateRecipe):
    """A candidate recipe annotated with resolved nutrition.

    ``parsed_ingredients`` holds the lookup service's parse of the
    ingredient lines; it is empty when enrichment is disabled or parsing
    failed.
    """

    nutrition: RecipeNutrition
    provenance: Provenance
    parsed_ingredients: list[ParsedIngredientLine] = Field(default_factory=list)
