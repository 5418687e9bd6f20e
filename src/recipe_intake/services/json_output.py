"""Recover JSON values from free-form model completions.

Models wrap JSON in prose or markdown fences even when told not to, so the
completion is tried against an ordered list of strategies and the first one
that decodes wins.
"""

import json
import re
from collections.abc import Callable
from dataclasses import dataclass

_FENCE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)
_CLOSERS = {"{": "}", "[": "]"}


@dataclass(frozen=True)
class ParsedJson:
    """Decoded value and the strategy that produced it."""

    value: object
    strategy: str


@dataclass(frozen=True)
class ParseFailure:
    """No strategy could decode the completion."""

    raw_text: str
    attempted: tuple[str, ...]


ParseResult = ParsedJson | ParseFailure


def _whole_text(text: str) -> str | None:
    return text.strip()


def _fenced_block(text: str) -> str | None:
    match = _FENCE.search(text)
    return match.group(1) if match else None


def _bracketed_span(text: str) -> str | None:
    # Leftmost opener up to the last matching closer.
    last = {closer: text.rfind(closer) for closer in _CLOSERS.values()}
    for index, char in enumerate(text):
        closer = _CLOSERS.get(char)
        if closer is not None and last[closer] > index:
            return text[index : last[closer] + 1]
    return None


STRATEGIES: tuple[tuple[str, Callable[[str], str | None]], ...] = (
    ("direct", _whole_text),
    ("fenced", _fenced_block),
    ("bracketed", _bracketed_span),
)


def parse_json_output(text: str) -> ParseResult:
    """Decode the first JSON value found in a model completion."""
    attempted: list[str] = []
    for name, candidate_for in STRATEGIES:
        candidate = candidate_for(text)
        if candidate is None:
            continue
        attempted.append(name)
        try:
            return ParsedJson(value=json.loads(candidate), strategy=name)
        except (ValueError, RecursionError):
            continue
    return ParseFailure(raw_text=text, attempted=tuple(attempted))
