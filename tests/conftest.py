"""Shared fixtures: a seven-word transcript and helpers to anchor highlights on it."""

from __future__ import annotations

import json

import pytest

from highlights.engine.intervals import IntervalSet
from highlights.engine.models import Interval, Token
from highlights.engine.tokens import TokenIndex


# ── Seed data ────────────────────────────────────────────────────────────────

SAMPLE_WORDS = [
    {"word": "Hello", "start": 0.0, "end": 0.5},
    {"word": "beautiful", "start": 0.6, "end": 1.2},
    {"word": "world", "start": 1.3, "end": 1.8},
    {"word": "this", "start": 2.0, "end": 2.3},
    {"word": "is", "start": 2.4, "end": 2.6},
    {"word": "a", "start": 2.7, "end": 2.8},
    {"word": "test", "start": 2.9, "end": 3.3},
]

BASE_COLORS = ["#ffeb3b", "#81c784", "#64b5f6", "#ff8a65", "#f06292"]

HSL_PATTERN = r"^hsl\(\d+, [\d.]+%, [\d.]+%\)$"


def span(tokens: TokenIndex, first: int, last: int, hid: str, color: str = "#ffeb3b") -> Interval:
    """Highlight covering tokens ``first``..``last`` inclusive."""
    return Interval(id=hid, start=tokens[first].start, end=tokens[last].end, color=color)


def member_indices(tokens: TokenIndex, interval: Interval) -> list[int]:
    return [t.index for t in tokens.tokens_in(interval.start, interval.end)]


@pytest.fixture
def sample_words():
    """Return a deep copy of the sample words."""
    return json.loads(json.dumps(SAMPLE_WORDS))


@pytest.fixture
def tokens(sample_words) -> TokenIndex:
    return TokenIndex.from_words(sample_words)


@pytest.fixture
def gapless_tokens() -> TokenIndex:
    """Four back-to-back one-second tokens (each end equals the next start)."""
    return TokenIndex(Token(i, f"w{i}", float(i), float(i + 1)) for i in range(4))


@pytest.fixture
def spaced_intervals() -> IntervalSet:
    return IntervalSet.of([
        Interval("h1", 0.0, 2.0, "#ffeb3b"),
        Interval("h2", 5.0, 8.0, "#81c784"),
        Interval("h3", 10.0, 15.0, "#64b5f6"),
    ])
