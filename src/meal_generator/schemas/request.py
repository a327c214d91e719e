"""Meal generation request schema."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from meal_generator.schemas.base import APIRequest


class EnrichmentRequest(APIRequest):
    """Pantry ingredients and user constraints for one generation run.

    Immutable once built; the canonical cache key is derived from it.
    """

    model_config = ConfigDict(frozen=True)

    ingredients: tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Pantry ingredients, in any order",
        examples=[["chickpeas", "rice", "spinach"]],
    )
    diet: str = Field(default="none", description="Dietary preference")
    calorie_target: float | None = Field(
        default=None, description="Optional calorie target per day"
    )
    servings: int = Field(default=1, ge=1, description="Number of servings")
    user_profile: dict[str, Any] = Field(
        default_factory=dict,
        description="Opaque profile details forwarded to the generation prompt",
    )
