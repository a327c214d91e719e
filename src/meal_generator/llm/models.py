"""Generation client data models.

Request/response bodies for the OpenAI-compatible chat completions API and
the provider-neutral completion result.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LLMCompletionResult(BaseModel):
    """Raw text returned by a generation client, plus usage metadata."""

    raw_response: str = Field(..., description="Raw text response from the model")
    model: str = Field(..., description="Model that generated the response")
    prompt_tokens: int | None = Field(default=None, description="Input token count")
    completion_tokens: int | None = Field(
        default=None, description="Output token count"
    )

    model_config = {"frozen": True}


class ChatMessage(BaseModel):
    """Single message in chat format."""

    role: str = Field(..., description="Message role: system, user, or assistant")
    content: str | None = Field(default=None, description="Message content")


class ChatCompletionRequest(BaseModel):
    """Request body for ``/chat/completions``."""

    model: str = Field(..., description="Model name (e.g., 'gpt-4o-mini')")
    messages: list[dict[str, str]] = Field(..., description="Chat messages")
    temperature: float = Field(default=0.2, description="Sampling temperature")
    max_tokens: int | None = Field(
        default=None,
        description="Maximum tokens to generate",
    )
    stream: bool = Field(default=False, description="Whether to stream response")


class ChatUsage(BaseModel):
    """Token usage from a chat completion."""

    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class ChatChoice(BaseModel):
    """Single choice in a chat completion.

    Legacy completion endpoints put the text in ``text`` instead of
    ``message.content``; both are accepted.
    """

    index: int = 0
    message: ChatMessage | None = None
    text: str | None = None
    finish_reason: str | None = None

    @property
    def content(self) -> str | None:
        if self.message is not None and self.message.content:
            return self.message.content
        return self.text


class ChatCompletionResponse(BaseModel):
    """Response from ``/chat/completions``."""

    id: str | None = None
    model: str = ""
    choices: list[ChatChoice] = Field(default_factory=list)
    usage: ChatUsage | None = None

    def first_content(self) -> str | None:
        """Text of the first choice, if any."""
        if not self.choices:
            return None
        return self.choices[0].content

    @classmethod
    def from_payload(cls, payload: Any) -> ChatCompletionResponse:
        """Validate a decoded JSON body, tolerating non-object payloads."""
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)
