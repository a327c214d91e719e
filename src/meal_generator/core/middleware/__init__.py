"""Custom middleware components."""

from meal_generator.core.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
]
