"""Read-only index over an ordered token sequence.

Lookups never raise: out-of-range indices are clamped and misses come back as
None (or -1 for index lookups).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from highlights.engine.models import Token


class TokenIndex:
    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        self._tokens: tuple[Token, ...] = tuple(tokens)

    @classmethod
    def from_words(cls, words: Sequence[dict[str, Any]]) -> TokenIndex:
        return cls(Token.from_dict(w, i) for i, w in enumerate(words or []))

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    def get(self, index: int) -> Token | None:
        if 0 <= index < len(self._tokens):
            return self._tokens[index]
        return None

    def _clamp(self, index: int) -> int:
        return max(0, min(index, len(self._tokens) - 1))

    # ── Time → token ─────────────────────────────────────────────────────

    def covering_token(self, time: float) -> Token | None:
        for tok in self._tokens:
            if tok.start <= time <= tok.end:
                return tok
        return None

    def nearest_token(self, time: float) -> Token | None:
        """Covering token, else the one whose start is closest to ``time``."""
        if not self._tokens:
            return None
        hit = self.covering_token(time)
        if hit is not None:
            return hit
        # min() keeps the first of equally distant tokens
        return min(self._tokens, key=lambda t: abs(t.start - time))

    def find_token_index(self, time: float) -> int:
        tok = self.nearest_token(time)
        return tok.index if tok is not None else -1

    # ── Token → time ─────────────────────────────────────────────────────

    def calculate_timestamps(self, start_index: int, end_index: int) -> tuple[float, float]:
        """Convert an inclusive index range to ``(start, end)`` seconds."""
        if not self._tokens:
            return 0.0, 0.0
        first = self._tokens[self._clamp(start_index)]
        last = self._tokens[self._clamp(end_index)]
        return first.start, last.end

    # ── Text extraction ──────────────────────────────────────────────────

    def tokens_in(self, start: float, end: float) -> list[Token]:
        return [t for t in self._tokens if t.start >= start and t.end <= end]

    def text_in(self, start: float, end: float) -> str:
        return " ".join(t.text for t in self.tokens_in(start, end))

    def text_between(self, start_index: int, end_index: int) -> str:
        if start_index < 0 or end_index >= len(self._tokens) or start_index > end_index:
            return ""
        return " ".join(t.text for t in self._tokens[start_index:end_index + 1])
