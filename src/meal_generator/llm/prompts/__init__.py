"""Generation prompt templates."""

from meal_generator.llm.prompts.base import BasePrompt
from meal_generator.llm.prompts.meal_generation import MealGenerationPrompt


__all__ = [
    "BasePrompt",
    "MealGenerationPrompt",
]
