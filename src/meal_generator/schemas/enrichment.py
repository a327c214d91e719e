"""Schemas for the ingredient lookup (enrichment) service."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field, model_validator

from meal_generator.schemas.base import DownstreamResponse
from meal_generator.schemas.recipe import Number, Text


INGREDIENT_CACHE_KEY_PREFIX = "inginfo"


class ParsedIngredient(DownstreamResponse):
    """A free-text ingredient line decomposed into a lookup key.

    Entries without an ``id`` or a non-zero ``amount`` cannot be looked up
    and are skipped rather than retried.
    """

    model_config = ConfigDict(frozen=True)

    id: int | str | None = None
    name: Text = ""
    amount: float | None = None
    unit: str = "unit"

    @model_validator(mode="before")
    @classmethod
    def _pick_unit(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        unit = data.get("unit") or data.get("unitShort") or data.get("unitLong")
        return {**data, "unit": unit or "unit"}

    @property
    def lookup_ready(self) -> bool:
        """Whether this entry carries enough to query the lookup service."""
        return self.id is not None and bool(self.amount)

    @property
    def cache_key(self) -> str:
        """Namespaced key for this exact id/amount/unit combination."""
        amount = f"{self.amount:g}" if self.amount is not None else ""
        return f"{INGREDIENT_CACHE_KEY_PREFIX}:{self.id}:{amount}:{self.unit}"


class IngredientNutrient(DownstreamResponse):
    """One nutrient reported by the lookup service.

    Names are free-form ("Calories", "Net Carbohydrates", ...); the
    aggregator classifies them by substring.
    """

    name: Text = ""
    amount: Number = 0.0
    unit: Text = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_title(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("title"):
            return {**data, "name": data["title"]}
        return data


class IngredientInformation(DownstreamResponse):
    """Nutrition facts for a fixed ingredient id, amount and unit."""

    id: int | str | None = None
    name: Text = ""
    nutrients: list[IngredientNutrient] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten_nutrition(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "nutrients" in data:
            return data
        nutrition = data.get("nutrition")
        nutrients = nutrition.get("nutrients") if isinstance(nutrition, dict) else None
        if not isinstance(nutrients, list):
            nutrients = []
        return {
            **data,
            "nutrients": [n for n in nutrients if isinstance(n, dict)],
        }
