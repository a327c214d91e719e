"""Caching layer.

This package provides:
- Two-tier cache store (process-local + optional shared Redis tier)
- Redis connection management for the shared tier
- Per-identity daily rate limiting on top of the cache tiers
"""

from meal_generator.cache.exceptions import CacheBackendError
from meal_generator.cache.rate_limit import RateLimiter, RateLimitResult
from meal_generator.cache.redis import (
    check_redis_health,
    close_redis_pool,
    get_cache_client,
    init_redis_pool,
)
from meal_generator.cache.store import (
    CacheStore,
    LocalCacheTier,
    NullCacheTier,
    RedisCacheTier,
    SharedCacheTier,
    SharedHit,
)


__all__ = [
    # Store
    "CacheBackendError",
    "CacheStore",
    "LocalCacheTier",
    "NullCacheTier",
    "RedisCacheTier",
    "SharedCacheTier",
    "SharedHit",
    # Connection management
    "check_redis_health",
    "close_redis_pool",
    "get_cache_client",
    "init_redis_pool",
    # Rate limiting
    "RateLimitResult",
    "RateLimiter",
]
