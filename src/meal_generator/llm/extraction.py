"""Recover a JSON payload from free-form model output.

Models asked for "JSON only" still wrap it in prose or code fences now and
then. ``extract_json`` tries, in order:

1. a strict parse of the whole text;
2. the largest balanced ``{...}`` or ``[...]`` substring that parses.

The outcome is always an explicit variant, ``Parsed`` or ``Unparseable``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

import orjson


_CLOSERS: Final[dict[str, str]] = {"{": "}", "[": "]"}


@dataclass(frozen=True, slots=True)
class Parsed:
    """Structured data recovered from the text."""

    value: Any
    salvaged: bool = False


@dataclass(frozen=True, slots=True)
class Unparseable:
    """No structured data could be recovered."""

    raw: str | None
    reason: str


type ExtractionResult = Parsed | Unparseable


def _match_close(text: str, start: int) -> int | None:
    """Return the index just past the bracket closing ``text[start]``.

    String literals are skipped so brackets inside quoted values do not
    count. Returns None when the brackets never balance.
    """
    expected: list[str] = []
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            expected.append(_CLOSERS[ch])
        elif ch in "}]":
            if not expected or ch != expected[-1]:
                return None
            expected.pop()
            if not expected:
                return i + 1

    return None


def balanced_spans(text: str) -> list[tuple[int, int]]:
    """All balanced bracketed ``(start, end)`` spans, largest first."""
    spans: list[tuple[int, int]] = []
    for start, ch in enumerate(text):
        if ch not in _CLOSERS:
            continue
        end = _match_close(text, start)
        if end is not None:
            spans.append((start, end))
    spans.sort(key=lambda span: (span[0] - span[1], span[0]))
    return spans


def extract_json(text: str | None) -> ExtractionResult:
    """Parse ``text`` strictly, else salvage the largest embedded JSON value."""
    if not text or not text.strip():
        return Unparseable(raw=text, reason="empty output")

    try:
        return Parsed(value=orjson.loads(text.strip()))
    except orjson.JSONDecodeError:
        pass

    for start, end in balanced_spans(text):
        try:
            return Parsed(value=orjson.loads(text[start:end]), salvaged=True)
        except orjson.JSONDecodeError:
            continue

    return Unparseable(raw=text, reason="no parsable JSON object or array")
