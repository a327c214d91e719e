"""Redis client and connection pool management for the shared cache tier.

The pool is created once during application startup (lifespan) and closed on
shutdown. The shared tier is optional: when Redis is disabled in settings no
pool is created and ``get_cache_client`` raises ``RuntimeError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from meal_generator.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from meal_generator.core.config import Settings

logger = get_logger(__name__)

_cache_pool: ConnectionPool[Any] | None = None
_cache_client: Redis[Any] | None = None


async def init_redis_pool(settings: Settings) -> Redis[Any] | None:
    """Initialize the shared cache connection pool.

    Args:
        settings: Application settings.

    Returns:
        The connected client, or None when the shared tier is disabled.

    Raises:
        redis.ConnectionError: If Redis is enabled but unreachable.
    """
    global _cache_pool, _cache_client  # noqa: PLW0603

    if not settings.redis.enabled:
        logger.info("Shared cache tier disabled, using local cache only")
        return None

    logger.info(
        "Initializing Redis connection",
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.cache_db,
    )

    _cache_pool = ConnectionPool.from_url(
        settings.redis_cache_url,
        max_connections=settings.redis.max_connections,
        socket_timeout=settings.redis.socket_timeout,
        decode_responses=True,
    )
    _cache_client = redis.Redis(connection_pool=_cache_pool)

    try:
        await _cache_client.ping()
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        await close_redis_pool()
        raise

    logger.info("Redis connection established")
    return _cache_client


async def close_redis_pool() -> None:
    """Close the shared cache connection pool."""
    global _cache_pool, _cache_client  # noqa: PLW0603

    if _cache_client:
        await _cache_client.aclose()
        _cache_client = None

    if _cache_pool:
        await _cache_pool.disconnect()
        _cache_pool = None

    logger.info("Redis connection closed")


def get_cache_client() -> Redis[Any]:
    """Get the shared cache Redis client.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _cache_client is None:
        msg = "Redis cache client not initialized. Call init_redis_pool() first."
        raise RuntimeError(msg)
    return _cache_client


async def check_redis_health() -> dict[str, str]:
    """Report the shared cache tier status for readiness probes."""
    if _cache_client is None:
        return {"redis_cache": "not_configured"}
    try:
        await _cache_client.ping()
    except (redis.ConnectionError, redis.TimeoutError):
        return {"redis_cache": "unhealthy"}
    return {"redis_cache": "healthy"}
