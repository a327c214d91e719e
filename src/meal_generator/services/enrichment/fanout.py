"""Bounded-concurrency ingredient lookup.

Resolves parsed ingredients to nutrition facts through the cache store and
the lookup client. Lookups are scattered under a semaphore and gathered back
in input order; a failed lookup yields ``None`` and is cached briefly so a
flapping upstream is not hammered.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from meal_generator.clients.exceptions import EnrichmentLookupError
from meal_generator.observability.logging import get_logger
from meal_generator.schemas.enrichment import IngredientInformation, ParsedIngredient


if TYPE_CHECKING:
    from meal_generator.cache.store import CacheStore
    from meal_generator.clients.protocol import IngredientLookupProtocol

logger = get_logger(__name__)

DEFAULT_CONCURRENCY: Final[int] = 5
DEFAULT_LOOKUP_TIMEOUT: Final[float] = 15.0
DEFAULT_SUCCESS_TTL: Final[int] = 86400
DEFAULT_FAILURE_TTL: Final[int] = 60


def is_failure_marker(value: Any) -> bool:
    """Whether a cached value records a failed lookup."""
    return isinstance(value, dict) and bool(value.get("error"))


class EnrichmentFanout:
    """Resolves ingredient lookups with a bound on in-flight calls.

    Cache Strategy:
    - Cache key: "inginfo:{id}:{amount}:{unit}"
    - Success TTL: 24 hours by default
    - Failure marker TTL: 60 seconds by default
    """

    def __init__(
        self,
        store: CacheStore,
        client: IngredientLookupProtocol,
        concurrency: int = DEFAULT_CONCURRENCY,
        lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT,
        success_ttl: int = DEFAULT_SUCCESS_TTL,
        failure_ttl: int = DEFAULT_FAILURE_TTL,
    ) -> None:
        """Initialize the fan-out.

        Args:
            store: Cache store for lookup results.
            client: Ingredient lookup client.
            concurrency: Maximum lookups in flight per ``enrich`` call.
            lookup_timeout: Seconds before a single lookup counts as failed.
            success_ttl: TTL for successful lookups.
            failure_ttl: TTL for failure markers.
        """
        if concurrency < 1:
            msg = "concurrency must be at least 1"
            raise ValueError(msg)

        self._store = store
        self._client = client
        self.concurrency = concurrency
        self.lookup_timeout = lookup_timeout
        self.success_ttl = success_ttl
        self.failure_ttl = failure_ttl

    async def enrich(
        self,
        parsed: Sequence[ParsedIngredient | None],
    ) -> list[IngredientInformation | None]:
        """Resolve every parsed ingredient, preserving input order.

        Entries that are None or lack an id/amount map to None without a
        lookup. Identical lookup keys are resolved once and share a result.
        """
        unique: dict[str, ParsedIngredient] = {}
        for item in parsed:
            if item is not None and item.lookup_ready:
                unique.setdefault(item.cache_key, item)

        if not unique:
            return [None] * len(parsed)

        semaphore = asyncio.Semaphore(self.concurrency)

        async def lookup_with_semaphore(
            ingredient: ParsedIngredient,
        ) -> IngredientInformation | None:
            async with semaphore:
                return await self._lookup(ingredient)

        keys = list(unique)
        results = await asyncio.gather(
            *[lookup_with_semaphore(unique[key]) for key in keys]
        )
        resolved = dict(zip(keys, results, strict=True))

        logger.debug(
            "Enrichment fan-out complete",
            requested=len(parsed),
            distinct=len(keys),
            resolved=sum(1 for r in results if r is not None),
        )

        return [
            resolved[item.cache_key]
            if item is not None and item.lookup_ready
            else None
            for item in parsed
        ]

    async def _lookup(self, ingredient: ParsedIngredient) -> IngredientInformation | None:
        key = ingredient.cache_key

        cached = await self._store.get(key)
        if cached is not None:
            if is_failure_marker(cached):
                return None
            try:
                return IngredientInformation.model_validate(cached)
            except ValidationError:
                logger.warning("Discarding malformed cached lookup", key=key)

        assert ingredient.id is not None
        assert ingredient.amount is not None

        try:
            async with asyncio.timeout(self.lookup_timeout):
                info = await self._client.resolve(
                    ingredient.id, ingredient.amount, ingredient.unit
                )
        except EnrichmentLookupError as e:
            await self._remember_failure(key, str(e), e.status_code)
            return None
        except TimeoutError:
            await self._remember_failure(
                key, f"lookup timed out after {self.lookup_timeout}s", None
            )
            return None

        await self._store.set(key, info.model_dump(mode="json"), self.success_ttl)
        return info

    async def _remember_failure(
        self,
        key: str,
        message: str,
        status_code: int | None,
    ) -> None:
        logger.info(
            "Ingredient lookup failed",
            key=key,
            error=message,
            status_code=status_code,
        )
        marker: dict[str, Any] = {"error": True, "message": message}
        if status_code is not None:
            marker["status"] = status_code
        await self._store.set(key, marker, self.failure_ttl)
