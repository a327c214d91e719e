"""HTTP client for OpenAI-compatible chat completion services.

Speaks the ``/chat/completions`` API, so any compatible gateway works by
pointing ``llm.openai.url`` at it.
"""

from __future__ import annotations

from typing import Any

import httpx
import orjson
from aiolimiter import AsyncLimiter

from meal_generator.llm.exceptions import (
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from meal_generator.llm.models import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    LLMCompletionResult,
)
from meal_generator.observability.logging import get_logger


logger = get_logger(__name__)


class OpenAIClient:
    """Async HTTP client for an OpenAI-compatible generation service.

    Each call is a single attempt: a generation request is too slow and
    costly to repeat inside one pipeline run, so failures surface
    immediately as ``LLMError`` subclasses.

    Attributes:
        base_url: API base URL (without ``/chat/completions``).
        model: Default model (e.g., gpt-4o-mini).
        api_key: API key sent as a bearer token.
        timeout: HTTP request timeout in seconds.
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        requests_per_minute: float = 60.0,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key for bearer authentication.
            model: Default model name.
            base_url: API base URL.
            timeout: HTTP request timeout in seconds (default: 60).
            requests_per_minute: Pacing for outgoing requests (default: 60).
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client: httpx.AsyncClient | None = None
        # 1 request per (60/rpm) seconds, so no initial burst
        self._rate_limiter = AsyncLimiter(1, 60.0 / requests_per_minute)

    @property
    def chat_url(self) -> str:
        """Get the chat completions endpoint URL."""
        return f"{self.base_url}/chat/completions"

    async def initialize(self) -> None:
        """Initialize the HTTP client with auth headers."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
            ),
        )
        logger.info(
            "OpenAIClient initialized",
            model=self.model,
            timeout=self.timeout,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("OpenAIClient shutdown")

    async def _execute(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        """Send one request and decode the response body."""
        if self._http_client is None:
            await self.initialize()

        assert self._http_client is not None

        await self._rate_limiter.acquire()

        try:
            response = await self._http_client.post(
                self.chat_url,
                json=request.model_dump(exclude_none=True),
            )

            if response.status_code == 429:
                retry_after = response.headers.get("retry-after", "60")
                msg = f"Generation rate limit exceeded, retry after {retry_after}s"
                raise LLMRateLimitError(msg)

            response.raise_for_status()

        except httpx.TimeoutException as e:
            logger.warning(
                "Generation request timeout",
                timeout=self.timeout,
                url=self.chat_url,
            )
            msg = f"Generation timeout after {self.timeout}s"
            raise LLMTimeoutError(msg) from e

        except httpx.HTTPStatusError as e:
            logger.error(
                "Generation request failed",
                status_code=e.response.status_code,
                url=self.chat_url,
            )
            msg = f"Generation service returned {e.response.status_code}"
            raise LLMResponseError(msg) from e

        except httpx.RequestError as e:
            logger.warning(
                "Generation connection error",
                url=self.chat_url,
                error=str(e),
            )
            msg = f"Cannot connect to generation service: {e}"
            raise LLMUnavailableError(msg) from e

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            logger.warning(
                "Generation service returned a non-JSON body",
                body=response.text[:200],
            )
            payload = None

        return ChatCompletionResponse.from_payload(payload)

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a text completion.

        Args:
            prompt: User prompt text.
            system: Optional system prompt for context.
            options: Sampling options (``temperature``, ``max_tokens``).

        Returns:
            LLMCompletionResult with the raw text; empty when the service
            returned no content.

        Raises:
            LLMUnavailableError: If the service cannot be reached.
            LLMTimeoutError: If the request times out.
            LLMResponseError: If the service returns an HTTP error.
            LLMRateLimitError: If the service rate limits the request.
        """
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        options = options or {}
        request = ChatCompletionRequest(
            model=self.model,
            messages=messages,
            temperature=options.get("temperature", 0.2),
            max_tokens=options.get("max_tokens"),
        )

        response = await self._execute(request)
        usage = response.usage

        return LLMCompletionResult(
            raw_response=response.first_content() or "",
            model=response.model or self.model,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
        )
