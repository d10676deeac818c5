"""Overlay of proposed highlights that the user can accept or reject.

Suggestions live in token-index coordinates and are converted to seconds only
when accepted.  They may overlap committed highlights (the highlight wins when
rendering) but never each other.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Set
from dataclasses import dataclass, field
from typing import Any

from highlights.engine.colors import allocate_color
from highlights.engine.intervals import IntervalSet
from highlights.engine.models import Interval, Suggestion
from highlights.engine.tokens import TokenIndex
from highlights.utils.logging import debug


@dataclass
class AcceptResult:
    overlay: SuggestionOverlay
    intervals: IntervalSet
    accepted: bool = False
    color: str | None = None
    interval: Interval | None = None


def _ranges_overlap(a: Suggestion, b: Suggestion) -> bool:
    return a.start_token <= b.end_token and a.end_token >= b.start_token


@dataclass(frozen=True)
class SuggestionOverlay:
    suggestions: tuple[Suggestion, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, suggestions: Iterable[Suggestion]) -> SuggestionOverlay:
        """Build an overlay, dropping any suggestion that overlaps an earlier one."""
        kept: list[Suggestion] = []
        for s in suggestions:
            clash = next((k for k in kept if _ranges_overlap(s, k)), None)
            if clash is not None:
                debug(f"Dropping suggestion {s.id} [{s.start_token}-{s.end_token}]: "
                      f"overlaps suggestion {clash.id}")
                continue
            kept.append(s)
        return cls(tuple(kept))

    @classmethod
    def from_wire(cls, items: Iterable[dict[str, Any]]) -> SuggestionOverlay:
        return cls.of(Suggestion.from_dict(d) for d in items or [])

    def to_wire(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self.suggestions]

    def __iter__(self) -> Iterator[Suggestion]:
        return iter(self.suggestions)

    def __len__(self) -> int:
        return len(self.suggestions)

    def get(self, suggestion_id: str) -> Suggestion | None:
        return next((s for s in self.suggestions if s.id == suggestion_id), None)

    def find_for_token(self, token_index: int) -> Suggestion | None:
        return next((s for s in self.suggestions if s.covers(token_index)), None)

    def drop_conflicting(self, intervals: IntervalSet, tokens: TokenIndex) -> SuggestionOverlay:
        """Remove suggestions whose time range overlaps a committed highlight."""
        kept = []
        for s in self.suggestions:
            start, end = tokens.calculate_timestamps(s.start_token, s.end_token)
            if intervals.check_overlap(start, end):
                debug(f"Dropping suggestion {s.id} ({start:.2f}-{end:.2f}): overlaps a highlight")
                continue
            kept.append(s)
        if len(kept) == len(self.suggestions):
            return self
        return SuggestionOverlay(tuple(kept))

    def reject(self, suggestion: Suggestion | str) -> SuggestionOverlay:
        sid = suggestion if isinstance(suggestion, str) else suggestion.id
        if self.get(sid) is None:
            return self
        return SuggestionOverlay(tuple(s for s in self.suggestions if s.id != sid))

    def accept(self, suggestion: Suggestion | str, intervals: IntervalSet,
               used_colors: Set[str], tokens: TokenIndex,
               **allocator_opts: Any) -> AcceptResult:
        """Materialize a suggestion as a highlight.

        On overlap with an existing highlight nothing changes and the
        suggestion stays in the overlay so the conflict can be fixed by hand.
        """
        s = self.get(suggestion if isinstance(suggestion, str) else suggestion.id)
        if s is None or len(tokens) == 0:
            return AcceptResult(self, intervals)

        start, end = tokens.calculate_timestamps(s.start_token, s.end_token)
        if intervals.check_overlap(start, end):
            debug(f"Accept of suggestion {s.id} rejected: [{start:.3f}, {end:.3f}] overlaps")
            return AcceptResult(self, intervals)

        color = s.color if s.color and s.color not in used_colors else allocate_color(
            used_colors, **allocator_opts)
        new_set, new = intervals.add(start, end, used_colors, color=color)
        return AcceptResult(self.reject(s), new_set, accepted=True, color=color, interval=new)
