"""Request canonicalization for the recipe cache.

Two requests that differ only in ingredient order, whitespace or letter
case must share a cache entry. Calorie target and user profile are not part
of the key.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING, Any, Final

import orjson


if TYPE_CHECKING:
    from meal_generator.schemas.request import EnrichmentRequest


RECIPE_CACHE_KEY_PREFIX: Final[str] = "recipe"


def canonical_payload(request: EnrichmentRequest) -> dict[str, Any]:
    """Normalized request fields that identify a cached recipe set."""
    return {
        "ingredients": sorted(item.strip().lower() for item in request.ingredients),
        "diet": request.diet.strip().lower(),
        "servings": int(request.servings),
    }


def canonicalize(request: EnrichmentRequest) -> str:
    """Deterministic cache key for ``request``: ``recipe:<sha256 hex>``."""
    serialized = orjson.dumps(canonical_payload(request), option=orjson.OPT_SORT_KEYS)
    return f"{RECIPE_CACHE_KEY_PREFIX}:{hashlib.sha256(serialized).hexdigest()}"
