"""Spoonacular API client package.

Provides ingredient parsing and nutrition lookup for the enrichment stage.
"""

from meal_generator.clients.spoonacular.client import SpoonacularClient


__all__ = ["SpoonacularClient"]
