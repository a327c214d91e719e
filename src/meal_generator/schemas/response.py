"""Meal generation response schema."""

from __future__ import annotations

from pydantic import Field

from meal_generator.schemas.base import APIResponse
from meal_generator.schemas.recipe import EnrichedRecipe


class GenerateMealsResponse(APIResponse):
    """Recipes for one request, flagged when served from the recipe cache."""

    recipes: list[EnrichedRecipe] = Field(default_factory=list)
    cached: bool = Field(default=False, description="Served from the recipe cache")
