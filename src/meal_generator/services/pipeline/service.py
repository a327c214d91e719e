"""Meal generation pipeline.

Runs one request through:
1. the per-identity daily rate limit
2. the recipe cache (keyed on the canonicalized request)
3. generation of candidate recipes
4. ingredient parsing and bounded-concurrency enrichment
5. nutrition aggregation
6. writing the finished recipes back to the cache

Every outcome is a ``PipelineResult`` variant; nothing raises out of
``Pipeline.run``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from pydantic import TypeAdapter, ValidationError

from meal_generator.clients.exceptions import EnrichmentLookupError
from meal_generator.core.exceptions import ConfigurationError
from meal_generator.observability.logging import get_logger
from meal_generator.schemas.recipe import EnrichedRecipe
from meal_generator.services.generation.exceptions import (
    GenerationFormatError,
    GenerationUnavailableError,
)
from meal_generator.services.nutrition.aggregator import NutritionAggregator
from meal_generator.services.pipeline.canonical import canonicalize


if TYPE_CHECKING:
    from meal_generator.cache.rate_limit import RateLimiter
    from meal_generator.cache.store import CacheStore
    from meal_generator.clients.protocol import IngredientLookupProtocol
    from meal_generator.schemas.enrichment import (
        IngredientInformation,
        ParsedIngredient,
    )
    from meal_generator.schemas.recipe import CandidateRecipe
    from meal_generator.schemas.request import EnrichmentRequest
    from meal_generator.services.enrichment.fanout import EnrichmentFanout
    from meal_generator.services.generation.service import GenerationService

logger = get_logger(__name__)

DEFAULT_RECIPE_TTL: Final[int] = 6 * 60 * 60
DEFAULT_PARSE_TIMEOUT: Final[float] = 15.0

_cached_recipes = TypeAdapter(list[EnrichedRecipe])


class PipelineStatus(StrEnum):
    """Terminal state of a pipeline run."""

    DONE = "DONE"
    RATE_LIMITED = "RATE_LIMITED"
    FAILED = "FAILED"


class FailureReason(StrEnum):
    """Why a run ended in ``FAILED``."""

    CONFIGURATION_ERROR = "configuration_error"
    GENERATION_FORMAT_ERROR = "generation_format_error"
    GENERATION_UNAVAILABLE = "generation_unavailable"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True, slots=True)
class PipelineDone:
    """Recipes produced, or served from the recipe cache."""

    recipes: list[EnrichedRecipe]
    cached: bool = False
    status: PipelineStatus = field(default=PipelineStatus.DONE, init=False)


@dataclass(frozen=True, slots=True)
class PipelineRateLimited:
    """The caller exhausted today's quota."""

    used_today: int
    limit: int
    status: PipelineStatus = field(default=PipelineStatus.RATE_LIMITED, init=False)


@dataclass(frozen=True, slots=True)
class PipelineFailed:
    """The run aborted; ``raw`` carries unusable generation output if any."""

    reason: FailureReason
    message: str
    raw: str | None = None
    status: PipelineStatus = field(default=PipelineStatus.FAILED, init=False)


type PipelineResult = PipelineDone | PipelineRateLimited | PipelineFailed


class Pipeline:
    """Orchestrates one meal generation request end to end.

    Holds no per-request state; one instance serves every request for the
    application's lifetime.
    """

    def __init__(
        self,
        *,
        store: CacheStore,
        rate_limiter: RateLimiter,
        generation: GenerationService,
        lookup: IngredientLookupProtocol,
        fanout: EnrichmentFanout,
        aggregator: NutritionAggregator | None = None,
        recipe_ttl: int = DEFAULT_RECIPE_TTL,
        parse_timeout: float = DEFAULT_PARSE_TIMEOUT,
    ) -> None:
        """Initialize the pipeline.

        Args:
            store: Cache store for finished recipe sets.
            rate_limiter: Per-identity daily quota.
            generation: Generation stage adapter.
            lookup: Ingredient lookup client; enrichment is skipped when it
                is not enabled.
            fanout: Bounded-concurrency lookup engine.
            aggregator: Nutrition aggregator.
            recipe_ttl: TTL for cached recipe sets.
            parse_timeout: Seconds before one recipe's ingredient parse
                counts as failed.
        """
        self._store = store
        self._rate_limiter = rate_limiter
        self._generation = generation
        self._lookup = lookup
        self._fanout = fanout
        self._aggregator = aggregator or NutritionAggregator()
        self.recipe_ttl = recipe_ttl
        self.parse_timeout = parse_timeout

    async def run(
        self,
        request: EnrichmentRequest,
        identity: str | None = None,
    ) -> PipelineResult:
        """Process ``request`` on behalf of ``identity``."""
        try:
            return await self._run(request, identity)
        except Exception:
            logger.exception("Pipeline run failed unexpectedly")
            return PipelineFailed(
                reason=FailureReason.INTERNAL_ERROR,
                message="Internal server error",
            )

    async def _run(
        self,
        request: EnrichmentRequest,
        identity: str | None,
    ) -> PipelineResult:
        limit = await self._rate_limiter.check_and_increment(identity)
        if not limit.allowed:
            return PipelineRateLimited(used_today=limit.count, limit=limit.limit)

        key = canonicalize(request)
        log = logger.bind(cache_key=key)
        log.debug("Rate checked", count=limit.count, limit=limit.limit)

        cached = await self._read_cached(key)
        if cached is not None:
            log.debug("Served from recipe cache", recipes=len(cached))
            return PipelineDone(recipes=cached, cached=True)
        log.debug("Recipe cache miss")

        try:
            candidates = await self._generation.generate(request)
        except ConfigurationError as e:
            log.error("Generation is not configured", error=str(e))
            return PipelineFailed(
                reason=FailureReason.CONFIGURATION_ERROR,
                message=str(e),
            )
        except GenerationFormatError as e:
            return PipelineFailed(
                reason=FailureReason.GENERATION_FORMAT_ERROR,
                message=str(e),
                raw=e.raw_text,
            )
        except GenerationUnavailableError as e:
            return PipelineFailed(
                reason=FailureReason.GENERATION_UNAVAILABLE,
                message=str(e),
            )
        log.debug("Generated", recipes=len(candidates))

        enrichment = await self._enrich(candidates)
        log.debug("Enriched", enabled=self._lookup.enabled)

        recipes = [
            self._aggregator.aggregate(recipe, infos, request.servings, parsed=parsed)
            for recipe, (parsed, infos) in zip(candidates, enrichment, strict=True)
        ]
        log.debug("Aggregated", recipes=len(recipes))

        await self._store.set(
            key,
            [recipe.model_dump(mode="json") for recipe in recipes],
            self.recipe_ttl,
        )
        log.debug("Cached", ttl=self.recipe_ttl)

        return PipelineDone(recipes=recipes, cached=False)

    async def _read_cached(self, key: str) -> list[EnrichedRecipe] | None:
        value = await self._store.get(key)
        if value is None:
            return None
        try:
            return _cached_recipes.validate_python(value)
        except ValidationError:
            logger.warning("Discarding malformed cached recipes", cache_key=key)
            return None

    async def _enrich(
        self,
        candidates: list[CandidateRecipe],
    ) -> list[tuple[list[ParsedIngredient | None], list[IngredientInformation | None]]]:
        """Parse output and aligned lookup results, per recipe.

        All recipes share a single fan-out so the concurrency bound and key
        de-duplication span the whole run.
        """
        if not self._lookup.enabled or not candidates:
            return [([], []) for _ in candidates]

        parsed_per_recipe = await asyncio.gather(
            *[self._parse(recipe) for recipe in candidates]
        )

        flat: list[ParsedIngredient | None] = [
            item for parsed in parsed_per_recipe for item in parsed
        ]
        resolved = await self._fanout.enrich(flat)

        per_recipe = []
        offset = 0
        for parsed in parsed_per_recipe:
            per_recipe.append((parsed, resolved[offset : offset + len(parsed)]))
            offset += len(parsed)
        return per_recipe

    async def _parse(self, recipe: CandidateRecipe) -> list[ParsedIngredient | None]:
        """Parse one recipe's ingredient lines; any failure yields no entries."""
        lines = [line for line in (i.as_line() for i in recipe.ingredients) if line]
        if not lines:
            return []

        try:
            async with asyncio.timeout(self.parse_timeout):
                return await self._lookup.parse_ingredients(lines)
        except EnrichmentLookupError as e:
            logger.info("Ingredient parse failed", title=recipe.title, error=str(e))
        except TimeoutError:
            logger.info(
                "Ingredient parse timed out",
                title=recipe.title,
                timeout=self.parse_timeout,
            )
        return []
