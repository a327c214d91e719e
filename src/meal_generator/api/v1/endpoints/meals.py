"""Meal generation endpoints.

Provides:
- POST /meals/generate for generating nutrition-annotated recipes from a pantry
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from meal_generator.api.dependencies import get_caller_identity, get_pipeline
from meal_generator.core.exceptions import (
    InternalErrorException,
    RateLimitExceededException,
    UpstreamFailureException,
)
from meal_generator.observability.logging import bind_context, get_logger
from meal_generator.schemas.request import EnrichmentRequest
from meal_generator.schemas.response import GenerateMealsResponse
from meal_generator.services.pipeline.service import (
    FailureReason,
    Pipeline,
    PipelineDone,
    PipelineFailed,
    PipelineRateLimited,
)


logger = get_logger(__name__)

router = APIRouter(tags=["Meals"])


@router.post(
    "/meals/generate",
    response_model=GenerateMealsResponse,
    summary="Generate recipes from pantry ingredients",
    description=(
        "Generates up to three recipes from the given pantry ingredients and "
        "constraints. Nutrition is looked up per ingredient when a lookup "
        "service is configured and falls back to the generator's estimates "
        "otherwise. Identical requests are served from cache."
    ),
    responses={
        429: {
            "description": "Daily rate limit exceeded",
            "content": {
                "application/json": {
                    "example": {
                        "error": "RATE_LIMIT_EXCEEDED",
                        "message": "Rate limit exceeded",
                        "usedToday": 51,
                        "limit": 50,
                    }
                }
            },
        },
        500: {"description": "Generation not configured or internal error"},
        502: {"description": "Generation service failed or returned bad output"},
    },
)
async def generate_meals(
    request: EnrichmentRequest,
    pipeline: Annotated[Pipeline, Depends(get_pipeline)],
    identity: Annotated[str | None, Depends(get_caller_identity)],
) -> GenerateMealsResponse:
    """Run the meal generation pipeline for one request."""
    bind_context(ingredients=len(request.ingredients), servings=request.servings)

    result = await pipeline.run(request, identity)

    match result:
        case PipelineDone(recipes=recipes, cached=cached):
            return GenerateMealsResponse(recipes=recipes, cached=cached)
        case PipelineRateLimited(used_today=used_today, limit=limit):
            raise RateLimitExceededException(used_today=used_today, limit=limit)
        case PipelineFailed(reason=FailureReason.GENERATION_FORMAT_ERROR) as failed:
            raise UpstreamFailureException(
                error="GENERATION_FORMAT_ERROR",
                message=failed.message,
                raw=failed.raw,
            )
        case PipelineFailed(reason=FailureReason.GENERATION_UNAVAILABLE) as failed:
            raise UpstreamFailureException(
                error="GENERATION_UNAVAILABLE",
                message=failed.message,
            )
        case PipelineFailed(reason=FailureReason.CONFIGURATION_ERROR) as failed:
            raise InternalErrorException(
                error="CONFIGURATION_ERROR",
                message=failed.message,
            )
        case PipelineFailed() as failed:
            raise InternalErrorException(
                error="INTERNAL_ERROR",
                message=failed.message,
            )
