"""Unit tests for custom exceptions and exception handlers."""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI

from meal_generator.core.exceptions import (
    AppException,
    ConfigurationError,
    InternalErrorException,
    MealGeneratorError,
    RateLimitExceededException,
    ServiceUnavailableException,
    UpstreamFailureException,
    setup_exception_handlers,
)


pytestmark = pytest.mark.unit


class TestExceptions:
    """Tests for exception construction."""

    def test_configuration_error_is_domain_error(self) -> None:
        """Should belong to the domain error family."""
        assert issubclass(ConfigurationError, MealGeneratorError)

    def test_rate_limit_carries_usage(self) -> None:
        """Should expose usage figures as extra fields."""
        exc = RateLimitExceededException(used_today=51, limit=50)

        assert exc.status_code == 429
        assert exc.extra == {"usedToday": 51, "limit": 50}

    def test_upstream_failure_raw_is_optional(self) -> None:
        """Should only carry raw output when given."""
        assert UpstreamFailureException("GENERATION_UNAVAILABLE", "down").extra == {}
        assert UpstreamFailureException("GENERATION_FORMAT_ERROR", "bad", raw="x").extra == {
            "raw": "x"
        }

    def test_status_codes(self) -> None:
        """Should map each exception to its HTTP status."""
        assert UpstreamFailureException("E", "m").status_code == 502
        assert InternalErrorException("E", "m").status_code == 500
        assert ServiceUnavailableException().status_code == 503


def _app() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/app-error")
    async def app_error() -> None:
        raise RateLimitExceededException(used_today=4, limit=3)

    @app.get("/crash")
    async def crash() -> None:
        msg = "boom"
        raise RuntimeError(msg)

    @app.get("/items/{item_id}")
    async def item(item_id: int) -> dict[str, int]:
        return {"item_id": item_id}

    return app


class TestExceptionHandlers:
    """Tests for the registered handlers."""

    async def test_app_exception(self) -> None:
        """Should render AppException with its extra fields."""
        transport = httpx.ASGITransport(app=_app())
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/app-error")

        assert response.status_code == 429
        assert response.json() == {
            "error": "RATE_LIMIT_EXCEEDED",
            "message": "Rate limit exceeded",
            "usedToday": 4,
            "limit": 3,
        }

    async def test_not_found(self) -> None:
        """Should render Starlette HTTP errors."""
        transport = httpx.ASGITransport(app=_app())
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "HTTP_ERROR"

    async def test_validation_error(self) -> None:
        """Should list validation problems per field."""
        transport = httpx.ASGITransport(app=_app())
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/items/abc")

        body = response.json()
        assert response.status_code == 422
        assert body["error"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "path.item_id"

    async def test_unhandled_exception(self) -> None:
        """Should hide unexpected errors behind a generic 500."""
        transport = httpx.ASGITransport(app=_app(), raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/crash")

        assert response.status_code == 500
        assert response.json() == {
            "error": "INTERNAL_SERVER_ERROR",
            "message": "An unexpected error occurred",
        }

    def test_app_exception_is_exception(self) -> None:
        """Should be raisable as a plain exception."""
        with pytest.raises(AppException, match="Service temporarily unavailable"):
            raise ServiceUnavailableException
