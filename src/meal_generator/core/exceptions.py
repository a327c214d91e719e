"""Custom exceptions and exception handlers.

Two families live here:
- Domain errors raised inside the pipeline (``MealGeneratorError``)
- HTTP-facing exceptions (``AppException``) rendered by the FastAPI handlers
  into structured ``ErrorResponse`` bodies
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, ConfigDict
from starlette.exceptions import HTTPException as StarletteHTTPException

from meal_generator.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import Request

logger = get_logger(__name__)


# =============================================================================
# Domain errors
# =============================================================================


class MealGeneratorError(Exception):
    """Base exception for pipeline errors."""


class ConfigurationError(MealGeneratorError):
    """A required downstream credential or setting is absent.

    Fatal for the run and never retried.
    """


# =============================================================================
# HTTP errors
# =============================================================================


class ErrorDetail(BaseModel):
    """Structured error detail for validation errors."""

    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Structured error response.

    Extra keys (``usedToday``, ``limit``, ``raw``...) are allowed so each
    failure class can carry its own diagnostics.
    """

    model_config = ConfigDict(extra="allow")

    error: str
    message: str
    details: list[ErrorDetail] | None = None


class AppException(Exception):
    """Base application exception rendered as an ``ErrorResponse``."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: list[ErrorDetail] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details
        self.extra = extra or {}
        super().__init__(message)


class RateLimitExceededException(AppException):
    """Caller exhausted the daily quota."""

    def __init__(self, used_today: int, limit: int) -> None:
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error="RATE_LIMIT_EXCEEDED",
            message="Rate limit exceeded",
            extra={"usedToday": used_today, "limit": limit},
        )


class UpstreamFailureException(AppException):
    """The generation service failed or returned unusable output."""

    def __init__(
        self, error: str, message: str, raw: str | None = None
    ) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            error=error,
            message=message,
            extra={"raw": raw} if raw is not None else None,
        )


class InternalErrorException(AppException):
    """Misconfiguration or an unexpected pipeline failure."""

    def __init__(self, error: str, message: str) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=error,
            message=message,
        )


class ServiceUnavailableException(AppException):
    """Service unavailable exception."""

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="SERVICE_UNAVAILABLE",
            message=message,
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        _request: Request,
        exc: AppException,
    ) -> ORJSONResponse:
        """Handle custom application exceptions."""
        body = ErrorResponse(
            error=exc.error,
            message=exc.message,
            details=exc.details,
            **exc.extra,
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(exclude_none=True),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        _request: Request,
        exc: StarletteHTTPException,
    ) -> ORJSONResponse:
        """Handle Starlette HTTP exceptions."""
        return ORJSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error="HTTP_ERROR",
                message=str(exc.detail),
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> ORJSONResponse:
        """Handle Pydantic validation errors."""
        details = [
            ErrorDetail(
                code="VALIDATION_ERROR",
                message=error["msg"],
                field=".".join(str(loc) for loc in error["loc"]),
            )
            for error in exc.errors()
        ]
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=ErrorResponse(
                error="VALIDATION_ERROR",
                message="Request validation failed",
                details=details,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        _request: Request,
        exc: Exception,
    ) -> ORJSONResponse:
        """Handle unexpected exceptions."""
        logger.opt(exception=exc).error("Unhandled exception")

        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred",
            ).model_dump(exclude_none=True),
        )
