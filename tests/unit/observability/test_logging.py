"""Unit tests for logging module.

Tests cover:
- Context variable management
- Logger retrieval
- Log formatting (JSON and dev)
- Sink setup
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock, patch

import orjson
import pytest

from meal_generator.observability.logging import (
    InterceptHandler,
    _format_record,
    _format_record_dev,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    setup_logging,
)


pytestmark = pytest.mark.unit


def _record(message: str = "hello", **extra: Any) -> dict[str, Any]:
    level = MagicMock()
    level.name = "INFO"
    return {
        "time": datetime(2026, 3, 14, 12, 0, tzinfo=UTC),
        "level": level,
        "message": message,
        "name": "meal_generator.test",
        "function": "fn",
        "line": 42,
        "extra": dict(extra),
        "exception": None,
    }


class TestContextManagement:
    """Tests for logging context management."""

    def test_bind_context_merges(self) -> None:
        """Should merge new values into the existing context."""
        clear_context()
        bind_context(request_id="req-1")
        bind_context(cache_key="recipe:abc")

        assert get_context() == {"request_id": "req-1", "cache_key": "recipe:abc"}

    def test_bind_context_overwrites_existing_keys(self) -> None:
        """Should overwrite existing keys."""
        clear_context()
        bind_context(request_id="old-id")
        bind_context(request_id="new-id")

        assert get_context()["request_id"] == "new-id"

    def test_clear_context_removes_all(self) -> None:
        """Should remove all context values."""
        bind_context(request_id="req-1")
        clear_context()

        assert get_context() == {}

    def test_get_context_returns_copy(self) -> None:
        """Should not expose the stored dict for mutation."""
        clear_context()
        get_context()["request_id"] = "sneaky"

        assert get_context() == {}


class TestGetLogger:
    """Tests for get_logger."""

    def test_binds_name(self) -> None:
        """Should return a logger usable for structured calls."""
        log = get_logger("meal_generator.test")

        assert hasattr(log, "info")
        assert hasattr(log, "bind")


class TestFormatRecord:
    """Tests for the JSON formatter."""

    def test_serializes_fields_and_context(self) -> None:
        """Should emit one JSON line with bound context and extras."""
        clear_context()
        bind_context(request_id="req-1")
        record = _record(cache_key="recipe:abc")

        fmt = _format_record(record)

        payload = orjson.loads(record["extra"]["_serialized"])
        assert fmt == "{extra[_serialized]}\n"
        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["request_id"] == "req-1"
        assert payload["cache_key"] == "recipe:abc"
        clear_context()

    def test_includes_exception_summary(self) -> None:
        """Should summarize the exception type and value."""
        record = _record()
        record["exception"] = (ValueError, ValueError("bad"), None)

        _format_record(record)

        payload = orjson.loads(record["extra"]["_serialized"])
        assert payload["exception"] == {"type": "ValueError", "value": "bad"}


class TestFormatRecordDev:
    """Tests for the human-readable formatter."""

    def test_appends_context(self) -> None:
        """Should append context pairs with braces escaped."""
        clear_context()
        bind_context(request_id="req-1")

        fmt = _format_record_dev(_record(profile={"age": 30}))

        assert "request_id=req-1" in fmt
        assert "{{'age': 30}}" in fmt
        clear_context()

    def test_adds_exception_placeholder(self) -> None:
        """Should render the traceback when an exception is attached."""
        record = _record()
        record["exception"] = (ValueError, ValueError("bad"), None)

        assert _format_record_dev(record).endswith("{exception}\n")


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.mark.parametrize(
        ("log_format", "is_development", "formatter"),
        [
            ("json", False, _format_record),
            ("text", False, _format_record_dev),
            ("json", True, _format_record_dev),
        ],
    )
    def test_selects_formatter(
        self, log_format: str, is_development: bool, formatter: Any
    ) -> None:
        """Should pick the JSON sink only outside development."""
        with patch("meal_generator.observability.logging.logger") as mock_logger:
            setup_logging("debug", log_format, is_development=is_development)

        mock_logger.remove.assert_called_once()
        kwargs = mock_logger.add.call_args.kwargs
        assert kwargs["format"] is formatter
        assert kwargs["level"] == "DEBUG"

    def test_intercepts_stdlib_logging(self) -> None:
        """Should route standard library records through Loguru."""
        with patch("meal_generator.observability.logging.logger"):
            setup_logging("INFO", "json")

        assert any(isinstance(h, InterceptHandler) for h in logging.getLogger().handlers)
        assert logging.getLogger("httpx").level == logging.WARNING
