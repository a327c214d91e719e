"""Shared test fixtures for the meal generator tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from meal_generator.cache.store import CacheStore, LocalCacheTier
from meal_generator.core.config import Settings
from meal_generator.schemas.request import EnrichmentRequest


if TYPE_CHECKING:
    from collections.abc import Callable


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """A clock tests can advance by hand."""
    return FakeClock()


@pytest.fixture
def local_tier(clock: FakeClock) -> LocalCacheTier:
    """Process-local tier driven by the fake clock."""
    return LocalCacheTier(clock=clock)


@pytest.fixture
def store(local_tier: LocalCacheTier) -> CacheStore:
    """Cache store with no shared tier."""
    return CacheStore(local=local_tier)


@pytest.fixture
def make_request() -> Callable[..., EnrichmentRequest]:
    """Factory for generation requests."""

    def _make(**overrides: Any) -> EnrichmentRequest:
        data: dict[str, Any] = {
            "ingredients": ["chickpeas", "rice", "spinach"],
            "diet": "none",
            "servings": 2,
        }
        data.update(overrides)
        return EnrichmentRequest.model_validate(data)

    return _make


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an isolated app: mock generation, no Redis, no lookup key."""
    return Settings(
        APP_ENV="test",
        OPENAI_API_KEY="",
        SPOONACULAR_API_KEY="",
        redis={"enabled": False},
        llm={"mock": True},
        rate_limiting={"daily_limit": 3},
        logging={"level": "WARNING", "format": "text"},
    )
