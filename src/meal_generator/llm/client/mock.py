"""Canned generation client for mock mode.

Returns a fixed recipe set without network access, so the rest of the
pipeline (enrichment, aggregation, caching) runs on predictable input.
"""

from __future__ import annotations

from typing import Any, Final

import orjson

from meal_generator.llm.models import LLMCompletionResult
from meal_generator.observability.logging import get_logger


logger = get_logger(__name__)

MOCK_MODEL: Final[str] = "mock"

MOCK_RECIPES: Final[list[dict[str, Any]]] = [
    {
        "title": "Chickpea & Spinach Pilaf",
        "description": "Quick pilaf with protein-rich chickpeas and vibrant spinach.",
        "calories": 480,
        "macros": {"protein": 22, "carbs": 65, "fat": 12},
        "ingredients": [
            {"name": "canned chickpeas", "quantity": "1 can (240g drained)"},
            {"name": "brown rice", "quantity": "1 cup (200g) cooked"},
            {"name": "spinach", "quantity": "2 cups (60g)"},
        ],
        "steps": [
            "Rinse and drain chickpeas.",
            "Cook rice according to package instructions.",
            "Sauté spinach until wilted, combine with rice and chickpeas, "
            "season to taste.",
        ],
    }
]


class MockGenerationClient:
    """Generation client that always answers with ``MOCK_RECIPES``."""

    def __init__(self, recipes: list[dict[str, Any]] | None = None) -> None:
        self.recipes = recipes if recipes is not None else MOCK_RECIPES

    async def initialize(self) -> None:
        logger.info("MockGenerationClient initialized", recipes=len(self.recipes))

    async def shutdown(self) -> None:
        return None

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Return the canned recipes as the completion text."""
        return LLMCompletionResult(
            raw_response=orjson.dumps({"recipes": self.recipes}).decode(),
            model=MOCK_MODEL,
        )
