"""Generation client exceptions.

Raised by the clients in ``meal_generator.llm.client`` and converted by the
generation service into a pipeline failure. None of them is retried: a
generation call is too costly to repeat inside one run.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for generation client errors."""


class LLMUnavailableError(LLMError):
    """Raised when the generation service cannot be reached."""


class LLMTimeoutError(LLMUnavailableError):
    """Raised when a generation request times out."""


class LLMResponseError(LLMError):
    """Raised when the generation service returns an HTTP error."""


class LLMRateLimitError(LLMError):
    """Raised when the generation service rate limits the request."""
