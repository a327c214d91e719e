"""FastAPI dependencies for service access.

Services are assembled during application startup and stored in app.state;
these dependencies hand them to route handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from fastapi import Request

from meal_generator.core.config import Settings, get_settings
from meal_generator.core.exceptions import ServiceUnavailableException


if TYPE_CHECKING:
    from meal_generator.services.pipeline.service import Pipeline


# Checked in order; the first non-empty header names the caller
IDENTITY_HEADERS: Final[tuple[str, ...]] = (
    "x-proxy-key",
    "x-proxy-token",
    "authorization",
)


async def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    settings: Settings | None = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


async def get_pipeline(request: Request) -> Pipeline:
    """Get the meal generation pipeline from app state.

    Raises:
        ServiceUnavailableException: 503 if the pipeline is not initialized.
    """
    pipeline: Pipeline | None = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        msg = "Meal generation pipeline not available"
        raise ServiceUnavailableException(msg)
    return pipeline


async def get_caller_identity(request: Request) -> str | None:
    """Identity the daily rate limit is counted against.

    Returns:
        The first present identity header, or None for anonymous callers.
    """
    for header in IDENTITY_HEADERS:
        value = request.headers.get(header, "").strip()
        if value:
            return value
    return None
