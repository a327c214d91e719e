"""Health check endpoints.

Provides liveness and readiness probes for orchestrators and load balancers.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from meal_generator.api.dependencies import get_app_settings
from meal_generator.cache.redis import check_redis_health
from meal_generator.core.config import Settings


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Health status", examples=["healthy"])
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Current server timestamp",
    )
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")


class ReadinessResponse(HealthResponse):
    """Readiness check response with dependency and capability status."""

    dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="Status of external dependencies",
    )
    capabilities: dict[str, bool] = Field(
        default_factory=dict,
        description="Which optional capabilities are configured",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Basic health check to verify the service is running.",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """Check if the service is alive. Does not touch external dependencies."""
    return HealthResponse(
        status="healthy",
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Reports shared cache health and configured capabilities.",
)
async def readiness_check(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ReadinessResponse:
    """Check if the service is ready to handle requests.

    A missing shared cache or lookup key degrades results but does not make
    the service unready; an unreachable shared cache does.
    """
    dependencies = await check_redis_health()

    all_healthy = all(
        status in ("healthy", "not_configured") for status in dependencies.values()
    )

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        version=settings.app.version,
        environment=settings.APP_ENV,
        dependencies=dependencies,
        capabilities={
            "generation": settings.generation_configured,
            "enrichment": settings.enrichment_configured,
            "shared_cache": settings.redis.enabled,
            "mock": settings.llm.mock,
        },
    )
