"""Unit tests for OpenAIClient.

Tests cover:
- Client lifecycle
- HTTP request construction
- Response parsing
- Error mapping (single attempt, no retries)
"""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from meal_generator.llm.client.openai import OpenAIClient
from meal_generator.llm.exceptions import (
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from meal_generator.llm.models import LLMCompletionResult
from tests.fixtures.llm_responses import create_chat_response


pytestmark = pytest.mark.unit

CHAT_URL = "https://api.openai.com/v1/chat/completions"

# High rate limit to disable pacing delays in tests
TEST_RATE_LIMIT = 10000.0


def _client(**overrides: object) -> OpenAIClient:
    kwargs: dict[str, object] = {
        "api_key": "test-api-key",
        "requests_per_minute": TEST_RATE_LIMIT,
    }
    kwargs.update(overrides)
    return OpenAIClient(**kwargs)  # type: ignore[arg-type]


class TestOpenAIClientInitialization:
    """Tests for client initialization and lifecycle."""

    async def test_initialize_creates_http_client(self) -> None:
        """Should create HTTP client on initialize."""
        client = _client()

        await client.initialize()

        assert client._http_client is not None
        assert client._http_client.headers["Authorization"] == "Bearer test-api-key"
        await client.shutdown()

    async def test_shutdown_closes_http_client(self) -> None:
        """Should close HTTP client on shutdown."""
        client = _client()

        await client.initialize()
        await client.shutdown()

        assert client._http_client is None

    async def test_initialize_idempotent(self) -> None:
        """Should be safe to call initialize multiple times."""
        client = _client()

        await client.initialize()
        first_client = client._http_client
        await client.initialize()

        assert client._http_client is first_client
        await client.shutdown()

    def test_chat_url_custom(self) -> None:
        """Should strip the trailing slash from a custom base URL."""
        client = _client(base_url="https://gateway.example.com/v1/")

        assert client.chat_url == "https://gateway.example.com/v1/chat/completions"


class TestOpenAIClientComplete:
    """Tests for complete method."""

    @respx.mock
    async def test_complete_success(self) -> None:
        """Should return the first choice's text and usage."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_chat_response('{"recipes": []}'))
        )
        client = _client()

        result = await client.complete("Ingredients: rice")

        assert isinstance(result, LLMCompletionResult)
        assert result.raw_response == '{"recipes": []}'
        assert result.model == "gpt-4o-mini"
        assert result.prompt_tokens == 120
        assert result.completion_tokens == 340
        await client.shutdown()

    @respx.mock
    async def test_request_body(self) -> None:
        """Should send system and user messages with sampling options."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_chat_response("{}"))
        )
        client = _client(model="gpt-4o")

        await client.complete(
            "Ingredients: rice",
            system="You are a chef.",
            options={"temperature": 0.5, "max_tokens": 800},
        )

        body = json.loads(route.calls.last.request.content)
        assert body["model"] == "gpt-4o"
        assert body["messages"] == [
            {"role": "system", "content": "You are a chef."},
            {"role": "user", "content": "Ingredients: rice"},
        ]
        assert body["temperature"] == 0.5
        assert body["max_tokens"] == 800
        assert body["stream"] is False
        await client.shutdown()

    @respx.mock
    async def test_omits_unset_max_tokens(self) -> None:
        """Should leave max_tokens out when no option is given."""
        route = respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_chat_response("{}"))
        )
        client = _client()

        await client.complete("Ingredients: rice")

        body = json.loads(route.calls.last.request.content)
        assert "max_tokens" not in body
        assert body["temperature"] == 0.2
        await client.shutdown()

    @respx.mock
    async def test_missing_content_is_empty(self) -> None:
        """Should return empty text when the response has no content."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(200, json=create_chat_response(None))
        )
        client = _client()

        result = await client.complete("Ingredients: rice")

        assert result.raw_response == ""
        await client.shutdown()

    @respx.mock
    async def test_non_json_body_is_empty(self) -> None:
        """Should treat a non-JSON body as an empty completion."""
        respx.post(CHAT_URL).mock(return_value=httpx.Response(200, text="<html>oops"))
        client = _client()

        result = await client.complete("Ingredients: rice")

        assert result.raw_response == ""
        assert result.model == "gpt-4o-mini"
        await client.shutdown()


class TestOpenAIClientErrors:
    """Tests for error mapping."""

    @respx.mock
    async def test_rate_limited(self) -> None:
        """Should raise LLMRateLimitError on 429."""
        respx.post(CHAT_URL).mock(
            return_value=httpx.Response(429, headers={"retry-after": "30"})
        )
        client = _client()

        with pytest.raises(LLMRateLimitError, match="30s"):
            await client.complete("Ingredients: rice")
        await client.shutdown()

    @respx.mock
    async def test_server_error_is_not_retried(self) -> None:
        """Should raise LLMResponseError after a single attempt."""
        route = respx.post(CHAT_URL).mock(return_value=httpx.Response(503))
        client = _client()

        with pytest.raises(LLMResponseError, match="503"):
            await client.complete("Ingredients: rice")

        assert route.call_count == 1
        await client.shutdown()

    @respx.mock
    async def test_timeout(self) -> None:
        """Should raise LLMTimeoutError on timeout."""
        respx.post(CHAT_URL).mock(side_effect=httpx.ReadTimeout("slow"))
        client = _client()

        with pytest.raises(LLMTimeoutError):
            await client.complete("Ingredients: rice")
        await client.shutdown()

    @respx.mock
    async def test_connection_error(self) -> None:
        """Should raise LLMUnavailableError when the service is unreachable."""
        respx.post(CHAT_URL).mock(side_effect=httpx.ConnectError("refused"))
        client = _client()

        with pytest.raises(LLMUnavailableError, match="Cannot connect"):
            await client.complete("Ingredients: rice")
        await client.shutdown()
