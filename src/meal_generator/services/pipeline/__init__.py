"""Meal generation pipeline package.

Orchestrates rate limiting, caching, generation, enrichment and aggregation.
"""

from __future__ import annotations

from meal_generator.services.pipeline.canonical import (
    RECIPE_CACHE_KEY_PREFIX,
    canonical_payload,
    canonicalize,
)
from meal_generator.services.pipeline.service import (
    FailureReason,
    Pipeline,
    PipelineDone,
    PipelineFailed,
    PipelineRateLimited,
    PipelineResult,
    PipelineStatus,
)


__all__ = [
    "RECIPE_CACHE_KEY_PREFIX",
    "FailureReason",
    "Pipeline",
    "PipelineDone",
    "PipelineFailed",
    "PipelineRateLimited",
    "PipelineResult",
    "PipelineStatus",
    "canonical_payload",
    "canonicalize",
]
