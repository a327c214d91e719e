"""Application lifecycle events."""

from meal_generator.core.events.lifespan import (
    build_generation_client,
    build_lookup_client,
    build_pipeline,
    lifespan,
)


__all__ = [
    "build_generation_client",
    "build_lookup_client",
    "build_pipeline",
    "lifespan",
]
