"""Unit tests for JSON extraction from model output.

Tests cover:
- Strict parsing
- Salvaging embedded JSON from prose and code fences
- Bracket matching inside string literals
- Unparseable outcomes
"""

from __future__ import annotations

import pytest

from meal_generator.llm.extraction import (
    Parsed,
    Unparseable,
    balanced_spans,
    extract_json,
)
from tests.fixtures.llm_responses import FENCED_RECIPES_RESPONSE


pytestmark = pytest.mark.unit


class TestExtractJson:
    """Tests for extract_json."""

    def test_strict_object(self) -> None:
        """Should parse clean JSON without salvaging."""
        result = extract_json('  {"recipes": []}\n')

        assert result == Parsed(value={"recipes": []}, salvaged=False)

    def test_strict_array(self) -> None:
        """Should accept a top-level array."""
        assert extract_json("[1, 2]") == Parsed(value=[1, 2])

    def test_salvages_fenced_output(self) -> None:
        """Should recover the JSON body from prose and a code fence."""
        result = extract_json(FENCED_RECIPES_RESPONSE)

        assert isinstance(result, Parsed)
        assert result.salvaged is True
        assert result.value["recipes"][0]["title"] == "Chickpea & Spinach Pilaf"

    def test_prefers_largest_span(self) -> None:
        """Should pick the outermost value over nested ones."""
        result = extract_json('Result: {"a": {"b": [1]}} done')

        assert result == Parsed(value={"a": {"b": [1]}}, salvaged=True)

    def test_skips_unparsable_larger_span(self) -> None:
        """Should fall back to a smaller span when the largest is not JSON."""
        result = extract_json('{not json but {"ok": true} inside}')

        assert result == Parsed(value={"ok": True}, salvaged=True)

    def test_brackets_inside_strings_are_ignored(self) -> None:
        """Should not close a span on a bracket inside a string literal."""
        text = 'note: {"step": "stir } and ] gently", "n": 1} end'

        result = extract_json(text)

        assert result == Parsed(value={"step": "stir } and ] gently", "n": 1}, salvaged=True)

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_empty_output(self, text: str | None) -> None:
        """Should report empty output as unparseable."""
        result = extract_json(text)

        assert isinstance(result, Unparseable)
        assert result.reason == "empty output"

    def test_no_json(self) -> None:
        """Should keep the raw text when nothing parses."""
        result = extract_json("Sorry, I cannot help with that {")

        assert result == Unparseable(
            raw="Sorry, I cannot help with that {",
            reason="no parsable JSON object or array",
        )


class TestBalancedSpans:
    """Tests for balanced_spans."""

    def test_largest_first(self) -> None:
        """Should order spans by length, longest first."""
        text = "[{}]"

        assert balanced_spans(text) == [(0, 4), (1, 3)]

    def test_mismatched_brackets(self) -> None:
        """Should ignore spans whose brackets do not match."""
        assert balanced_spans("{]") == []

    def test_escaped_quote_stays_in_string(self) -> None:
        """Should treat an escaped quote as part of the string."""
        text = '{"a": "x\\"}"}'

        assert balanced_spans(text) == [(0, len(text))]
