"""Per-identity daily request quota.

Each caller identity gets one counter per UTC calendar day under
``rl:<identity>:<YYYY-MM-DD>``. Counters live in the shared tier when one is
configured, so every process sees the same count; otherwise, or while the
shared tier is failing, they fall back to the process-local tier and are only
correct within one process. Counters reset by expiring after 24 hours.

The limiter reports; it never blocks or retries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Final

from meal_generator.cache.exceptions import CacheBackendError
from meal_generator.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Callable

    from meal_generator.cache.store import CacheStore

logger = get_logger(__name__)

RATE_LIMIT_KEY_PREFIX: Final[str] = "rl"
RATE_LIMIT_WINDOW_SECONDS: Final[int] = 24 * 60 * 60
ANONYMOUS_IDENTITY: Final[str] = "anon"


def _utc_today() -> date:
    return datetime.now(UTC).date()


@dataclass(frozen=True, slots=True)
class RateLimitResult:
    """Outcome of one quota check."""

    allowed: bool
    count: int
    limit: int


class RateLimiter:
    """Daily counter per caller identity."""

    def __init__(
        self,
        store: CacheStore,
        daily_limit: int,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Cache store whose tiers hold the counters.
            daily_limit: Requests allowed per identity per UTC day.
            today: Source of the current UTC date; injectable for tests.
        """
        self._store = store
        self.daily_limit = daily_limit
        self._today = today

    def bucket_key(self, identity: str | None) -> str:
        """Build the counter key for ``identity`` on the current UTC day."""
        who = identity or ANONYMOUS_IDENTITY
        return f"{RATE_LIMIT_KEY_PREFIX}:{who}:{self._today().isoformat()}"

    async def check_and_increment(self, identity: str | None) -> RateLimitResult:
        """Count one request for ``identity`` and report whether it is allowed."""
        key = self.bucket_key(identity)
        count = await self._increment(key)
        allowed = count <= self.daily_limit

        if not allowed:
            logger.warning(
                "Daily rate limit exceeded",
                key=key,
                count=count,
                limit=self.daily_limit,
            )

        return RateLimitResult(allowed=allowed, count=count, limit=self.daily_limit)

    async def _increment(self, key: str) -> int:
        shared = self._store.shared
        if shared.enabled:
            try:
                count = await shared.incr(key)
            except CacheBackendError as e:
                logger.warning(
                    "Shared rate limit counter unavailable, counting locally",
                    key=key,
                    error=str(e),
                )
            else:
                if count == 1:
                    await self._expire_shared(key)
                return count

        return self._store.local.incr(key, RATE_LIMIT_WINDOW_SECONDS)

    async def _expire_shared(self, key: str) -> None:
        # The request is already counted in the shared tier; a missing TTL
        # only leaves a stale key behind, since keys carry the date.
        try:
            await self._store.shared.expire(key, RATE_LIMIT_WINDOW_SECONDS)
        except CacheBackendError as e:
            logger.warning(
                "Failed to set rate limit counter expiry",
                key=key,
                error=str(e),
            )
