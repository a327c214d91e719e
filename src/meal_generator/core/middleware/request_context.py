"""Request context middleware.

This middleware:
- Generates or propagates a request ID and echoes it in the response
- Binds the request ID, method and path to the logging context
- Logs request completion with status code and processing time
"""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from meal_generator.observability.logging import bind_context, clear_context, get_logger


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Per-request logging context and access log."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        header_name: str = "X-Request-ID",
        exclude_paths: set[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name
        self.exclude_paths = exclude_paths or set()

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Bind context, process the request and log the outcome."""
        clear_context()

        request_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start_time = time.perf_counter()
        response = await call_next(request)
        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)

        response.headers[self.header_name] = request_id

        if request.url.path not in self.exclude_paths:
            logger.info(
                "Request completed",
                status_code=response.status_code,
                process_time_ms=process_time_ms,
            )

        return response
