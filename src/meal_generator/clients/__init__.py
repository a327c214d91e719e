"""Ingredient lookup clients."""

from meal_generator.clients.disabled import DisabledLookupClient
from meal_generator.clients.exceptions import EnrichmentLookupError
from meal_generator.clients.protocol import IngredientLookupProtocol
from meal_generator.clients.spoonacular import SpoonacularClient


__all__ = [
    "DisabledLookupClient",
    "EnrichmentLookupError",
    "IngredientLookupProtocol",
    "SpoonacularClient",
]
