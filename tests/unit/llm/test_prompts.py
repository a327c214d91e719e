"""Unit tests for generation prompts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from meal_generator.llm.prompts import MealGenerationPrompt
from meal_generator.schemas.recipe import GeneratedRecipes


if TYPE_CHECKING:
    from collections.abc import Callable

    from meal_generator.schemas.request import EnrichmentRequest

pytestmark = pytest.mark.unit


class TestMealGenerationPrompt:
    """Tests for MealGenerationPrompt."""

    def test_format_includes_constraints(
        self, make_request: Callable[..., EnrichmentRequest]
    ) -> None:
        """Should render ingredients, diet, target, servings and profile."""
        request = make_request(
            diet="vegetarian",
            calorie_target=1800,
            servings=3,
            user_profile={"allergies": ["peanut"]},
        )

        text = MealGenerationPrompt().format(request=request)

        assert text.splitlines() == [
            "Ingredients: chickpeas, rice, spinach",
            "Diet: vegetarian",
            "Calorie target: 1800",
            "Servings: 3",
            'UserProfile: {"allergies":["peanut"]}',
        ]

    @pytest.mark.parametrize("target", [None, 0])
    def test_missing_calorie_target(
        self, make_request: Callable[..., EnrichmentRequest], target: float | None
    ) -> None:
        """Should render an absent target as none."""
        text = MealGenerationPrompt().format(request=make_request(calorie_target=target))

        assert "Calorie target: none" in text

    def test_format_requires_request(self) -> None:
        """Should raise ValueError without a request."""
        with pytest.raises(ValueError, match="request"):
            MealGenerationPrompt().format()

    def test_options(self) -> None:
        """Should expose its sampling options."""
        assert MealGenerationPrompt().get_options() == {
            "temperature": 0.2,
            "max_tokens": 1200,
        }

    def test_metadata(self) -> None:
        """Should describe its output schema and name."""
        prompt = MealGenerationPrompt()

        assert prompt.output_schema is GeneratedRecipes
        assert prompt.name == "MealGenerationPrompt"
        assert prompt.system_prompt is not None
        assert "valid JSON" in prompt.system_prompt
