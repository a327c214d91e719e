"""Nutrition aggregation package.

Sums looked-up nutrients per recipe and falls back to generator estimates.
"""

from __future__ import annotations

from meal_generator.services.nutrition.aggregator import (
    NutritionAggregator,
    classify_nutrient,
    round_half_up,
)


__all__ = ["NutritionAggregator", "classify_nutrient", "round_half_up"]
