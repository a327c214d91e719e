"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Application startup: connect the shared cache, pick the generation and
  lookup clients, assemble the pipeline on ``app.state``
- Application shutdown: release client connections and the Redis pool
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from meal_generator.cache.rate_limit import RateLimiter
from meal_generator.cache.redis import close_redis_pool, init_redis_pool
from meal_generator.cache.store import CacheStore, NullCacheTier, RedisCacheTier
from meal_generator.clients.disabled import DisabledLookupClient
from meal_generator.clients.spoonacular.client import SpoonacularClient
from meal_generator.core.config import Settings, get_settings
from meal_generator.llm.client.mock import MockGenerationClient
from meal_generator.llm.client.openai import OpenAIClient
from meal_generator.llm.client.unconfigured import UnconfiguredGenerationClient
from meal_generator.observability.logging import get_logger, setup_logging
from meal_generator.services.enrichment.fanout import EnrichmentFanout
from meal_generator.services.generation.service import GenerationService
from meal_generator.services.nutrition.aggregator import NutritionAggregator
from meal_generator.services.pipeline.service import Pipeline


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI
    from redis.asyncio import Redis

    from meal_generator.clients.protocol import IngredientLookupProtocol
    from meal_generator.llm.client.protocol import GenerationClientProtocol

logger = get_logger(__name__)


def build_generation_client(settings: Settings) -> GenerationClientProtocol:
    """Pick the generation client for the configured capabilities."""
    if settings.llm.mock:
        return MockGenerationClient()
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY not set - generation will fail until configured")
        return UnconfiguredGenerationClient()
    return OpenAIClient(
        api_key=settings.OPENAI_API_KEY,
        model=settings.llm.openai.model,
        base_url=settings.llm.openai.url,
        timeout=settings.llm.openai.timeout,
        requests_per_minute=settings.llm.openai.requests_per_minute,
    )


def build_lookup_client(settings: Settings) -> IngredientLookupProtocol:
    """Pick the ingredient lookup client for the configured capabilities."""
    if not settings.SPOONACULAR_API_KEY:
        logger.info("SPOONACULAR_API_KEY not set - nutrition enrichment disabled")
        return DisabledLookupClient()
    return SpoonacularClient(
        api_key=settings.SPOONACULAR_API_KEY,
        base_url=settings.enrichment.spoonacular.url,
        timeout=settings.enrichment.spoonacular.timeout,
    )


def build_pipeline(
    settings: Settings,
    store: CacheStore,
    generation_client: GenerationClientProtocol,
    lookup_client: IngredientLookupProtocol,
) -> Pipeline:
    """Assemble the pipeline and its stages from settings."""
    return Pipeline(
        store=store,
        rate_limiter=RateLimiter(store, settings.rate_limiting.daily_limit),
        generation=GenerationService(
            generation_client,
            options={
                "temperature": settings.llm.openai.temperature,
                "max_tokens": settings.llm.openai.max_tokens,
            },
        ),
        lookup=lookup_client,
        fanout=EnrichmentFanout(
            store,
            lookup_client,
            concurrency=settings.enrichment.concurrency,
            lookup_timeout=settings.enrichment.lookup_timeout,
            success_ttl=settings.cache.ingredient_ttl,
            failure_ttl=settings.cache.ingredient_failure_ttl,
        ),
        aggregator=NutritionAggregator(),
        recipe_ttl=settings.cache.recipe_ttl,
        parse_timeout=settings.enrichment.lookup_timeout,
    )


async def _init_cache(settings: Settings) -> Redis[Any] | None:
    """Connect the shared cache tier, or None to run on the local tier only."""
    try:
        return await init_redis_pool(settings)
    except Exception:
        logger.exception("Failed to initialize Redis - continuing with local cache only")
        return None


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    redis_client = await _init_cache(settings)
    shared = RedisCacheTier(redis_client) if redis_client is not None else NullCacheTier()
    store = CacheStore(shared=shared, default_ttl=settings.cache.default_ttl)

    generation_client = build_generation_client(settings)
    await generation_client.initialize()

    lookup_client = build_lookup_client(settings)
    await lookup_client.initialize()

    app.state.cache_store = store
    app.state.generation_client = generation_client
    app.state.lookup_client = lookup_client
    app.state.pipeline = build_pipeline(settings, store, generation_client, lookup_client)

    logger.info(
        "Application startup complete",
        shared_cache=shared.enabled,
        generation=type(generation_client).__name__,
        enrichment=lookup_client.enabled,
    )


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services.

    Args:
        app: The FastAPI application instance.
    """
    logger.info("Shutting down application")

    lookup_client = getattr(app.state, "lookup_client", None)
    if lookup_client is not None:
        await lookup_client.shutdown()

    generation_client = getattr(app.state, "generation_client", None)
    if generation_client is not None:
        await generation_client.shutdown()

    await close_redis_pool()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Uses the settings the factory stored on ``app.state``, falling back to
    ``get_settings()``.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
