"""Meal generation prompt.

Turns a pantry and user constraints into a request for up to three recipes
in a fixed JSON envelope.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

import orjson
from pydantic import BaseModel

from meal_generator.schemas.recipe import GeneratedRecipes

from .base import BasePrompt


if TYPE_CHECKING:
    from meal_generator.schemas.request import EnrichmentRequest


class MealGenerationPrompt(BasePrompt[GeneratedRecipes]):
    """Prompt for generating recipes from pantry ingredients.

    Example input:
        ingredients=("chickpeas", "rice", "spinach"), diet="vegetarian",
        servings=2

    Example output:
        {
            "recipes": [
                {
                    "title": "Chickpea & Spinach Pilaf",
                    "description": "Quick pilaf with chickpeas and spinach.",
                    "ingredients": [{"name": "brown rice", "quantity": "1 cup"}],
                    "steps": ["Cook rice.", "Fold in chickpeas and spinach."],
                    "estimatedCalories": 480,
                    "macros": {"protein": 22, "carbs": 65, "fat": 12}
                }
            ]
        }
    """

    output_schema: ClassVar[type[BaseModel]] = GeneratedRecipes

    system_prompt: ClassVar[
        str | None
    ] = """You are an expert chef and registered dietitian. Given pantry ingredients and user constraints, respond ONLY with valid JSON.
Top-level: { "recipes": [ ... ] }
Each recipe must include: title, description, ingredients (array of {name,quantity}), steps (array of strings), estimatedCalories (number), macros {protein,carbs,fat}.
Return up to 3 recipes. No extra commentary."""

    temperature: ClassVar[float] = 0.2
    max_tokens: ClassVar[int | None] = 1200

    def format(self, **kwargs: Any) -> str:
        """Format the prompt from a generation request.

        Args:
            **kwargs: Must contain 'request', an ``EnrichmentRequest``.

        Returns:
            Formatted prompt string.

        Raises:
            ValueError: If 'request' key is missing.
        """
        request: EnrichmentRequest | None = kwargs.get("request")
        if request is None:
            msg = "Missing required 'request' argument"
            raise ValueError(msg)

        calorie_target = (
            f"{request.calorie_target:g}" if request.calorie_target else "none"
        )
        profile = orjson.dumps(request.user_profile, default=str).decode()

        return "\n".join(
            [
                f"Ingredients: {', '.join(request.ingredients)}",
                f"Diet: {request.diet}",
                f"Calorie target: {calorie_target}",
                f"Servings: {request.servings}",
                f"UserProfile: {profile}",
            ]
        )
