"""Two-tier key/value cache.

``CacheStore`` composes a process-local tier with an optional shared tier:

- ``get`` checks local first, then shared; a shared hit repopulates local.
- ``set`` writes local unconditionally and shared when configured.
- Shared-tier failures are logged and swallowed, never raised to callers.

Entries carry a per-entry TTL. Expired local entries are treated as absent
and evicted lazily on read. ``None`` means "absent"; it is never a cached
value.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import orjson
import redis.asyncio as redis

from meal_generator.cache.exceptions import CacheBackendError
from meal_generator.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable

    from redis.asyncio import Redis

logger = get_logger(__name__)


@dataclass(slots=True)
class CacheEntry:
    """A cached value and the clock reading after which it is stale."""

    value: Any
    expires_at: float


@dataclass(frozen=True, slots=True)
class SharedHit:
    """A value read from the shared tier with its remaining TTL (seconds)."""

    value: Any
    ttl: int | None = None


class LocalCacheTier:
    """In-process TTL cache. No eviction policy beyond expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the tier.

        Args:
            clock: Monotonic time source in seconds; injectable for tests.
        """
        self._entries: dict[str, CacheEntry] = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: int) -> None:
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def incr(self, key: str, ttl: int) -> int:
        """Increment a counter, starting a fresh ``ttl`` window when absent."""
        entry = self._entries.get(key)
        if entry is None or self._clock() > entry.expires_at:
            self.set(key, 1, ttl)
            return 1
        entry.value = int(entry.value) + 1
        return entry.value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)


@runtime_checkable
class SharedCacheTier(Protocol):
    """Network-backed tier shared by every process of the service.

    Implementations raise ``CacheBackendError`` on any backend failure.
    """

    @property
    def enabled(self) -> bool:
        """Whether a backend is configured at all."""
        ...

    async def get(self, key: str) -> SharedHit | None:
        """Read a value and its remaining TTL."""
        ...

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Write a JSON-serializable value with an expiry."""
        ...

    async def incr(self, key: str) -> int:
        """Atomically increment an integer counter and return the new value."""
        ...

    async def expire(self, key: str, ttl: int) -> None:
        """Set a key's time to live."""
        ...


class NullCacheTier:
    """Shared tier used when no backend is configured."""

    @property
    def enabled(self) -> bool:
        return False

    async def get(self, key: str) -> SharedHit | None:  # noqa: ARG002
        return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        pass

    async def incr(self, key: str) -> int:
        msg = f"No shared cache configured for {key}"
        raise CacheBackendError(msg)

    async def expire(self, key: str, ttl: int) -> None:
        pass


class RedisCacheTier:
    """Shared tier backed by ``redis.asyncio``. Values are stored as JSON."""

    def __init__(self, client: Redis[Any]) -> None:
        self._client = client

    @property
    def enabled(self) -> bool:
        return True

    async def get(self, key: str) -> SharedHit | None:
        try:
            async with self._client.pipeline(transaction=False) as pipe:
                pipe.get(key)
                pipe.ttl(key)
                raw, ttl = await pipe.execute()
        except (redis.RedisError, OSError) as e:
            msg = f"Shared cache read failed for {key}: {e}"
            raise CacheBackendError(msg) from e

        if raw is None:
            return None

        try:
            value = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            msg = f"Corrupt shared cache entry for {key}"
            raise CacheBackendError(msg) from e

        # TTL replies: -1 no expiry, -2 key vanished between GET and TTL
        return SharedHit(value=value, ttl=ttl if ttl and ttl > 0 else None)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            payload = orjson.dumps(value)
        except TypeError as e:
            msg = f"Value for {key} is not JSON serializable"
            raise CacheBackendError(msg) from e
        try:
            await self._client.set(key, payload, ex=ttl)
        except (redis.RedisError, OSError) as e:
            msg = f"Shared cache write failed for {key}: {e}"
            raise CacheBackendError(msg) from e

    async def incr(self, key: str) -> int:
        try:
            return int(await self._client.incr(key))
        except (redis.RedisError, OSError) as e:
            msg = f"Shared cache increment failed for {key}: {e}"
            raise CacheBackendError(msg) from e

    async def expire(self, key: str, ttl: int) -> None:
        try:
            await self._client.expire(key, ttl)
        except (redis.RedisError, OSError) as e:
            msg = f"Shared cache expire failed for {key}: {e}"
            raise CacheBackendError(msg) from e


class CacheStore:
    """Local tier in front of an optional shared tier.

    Constructed once per application lifetime and injected into the services
    that need it; tests build isolated instances.
    """

    def __init__(
        self,
        local: LocalCacheTier | None = None,
        shared: SharedCacheTier | None = None,
        default_ttl: int = 86400,
    ) -> None:
        """Initialize the store.

        Args:
            local: Process-local tier (a fresh one when omitted).
            shared: Shared tier; ``NullCacheTier`` when omitted.
            default_ttl: TTL for local repopulation when the shared tier
                cannot report one, and for ``set`` calls without a TTL.
        """
        self._local = local if local is not None else LocalCacheTier()
        self._shared = shared if shared is not None else NullCacheTier()
        self.default_ttl = default_ttl

    @property
    def local(self) -> LocalCacheTier:
        return self._local

    @property
    def shared(self) -> SharedCacheTier:
        return self._shared

    async def get(self, key: str) -> Any | None:
        """Return the cached value for ``key`` or None if absent/expired."""
        value = self._local.get(key)
        if value is not None:
            logger.debug("Cache hit", key=key, tier="local")
            return value

        if not self._shared.enabled:
            return None

        try:
            hit = await self._shared.get(key)
        except CacheBackendError as e:
            logger.warning("Shared cache read failed", key=key, error=str(e))
            return None

        if hit is None:
            logger.debug("Cache miss", key=key)
            return None

        # Never let the local copy outlive the shared one
        self._local.set(key, hit.value, hit.ttl or self.default_ttl)
        logger.debug("Cache hit", key=key, tier="shared")
        return hit.value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store ``value`` under ``key``, overwriting any previous value."""
        ttl = ttl if ttl is not None else self.default_ttl
        self._local.set(key, value, ttl)

        if not self._shared.enabled:
            return

        try:
            await self._shared.set(key, value, ttl)
        except CacheBackendError as e:
            logger.warning("Shared cache write failed", key=key, error=str(e))
