"""Pydantic schemas for requests, generated recipes and enrichment data."""

from meal_generator.schemas.base import (
    APIRequest,
    APIResponse,
    DownstreamResponse,
)
from meal_generator.schemas.enrichment import (
    IngredientInformation,
    IngredientNutrient,
    ParsedIngredient,
)
from meal_generator.schemas.recipe import (
    CandidateRecipe,
    EnrichedRecipe,
    GeneratedRecipes,
    Macros,
    NutritionSource,
    NutritionTotals,
    ParsedIngredientLine,
    Provenance,
    RecipeIngredient,
    RecipeNutrition,
)
from meal_generator.schemas.request import EnrichmentRequest
from meal_generator.schemas.response import GenerateMealsResponse


__all__ = [
    "APIRequest",
    "APIResponse",
    "CandidateRecipe",
    "DownstreamResponse",
    "EnrichedRecipe",
    "EnrichmentRequest",
    "GenerateMealsResponse",
    "GeneratedRecipes",
    "IngredientInformation",
    "IngredientNutrient",
    "Macros",
    "NutritionSource",
    "NutritionTotals",
    "ParsedIngredient",
    "ParsedIngredientLine",
    "Provenance",
    "RecipeIngredient",
    "RecipeNutrition",
]
