"""Cache layer exceptions."""

from __future__ import annotations

from meal_generator.core.exceptions import MealGeneratorError


class CacheBackendError(MealGeneratorError):
    """Raised by the shared tier when the backend cannot serve a request.

    The cache is a performance optimization, so callers above the tier
    (CacheStore, RateLimiter) log and swallow this instead of failing.
    """
