"""Immutable collection of non-overlapping highlights.

Every mutation returns a new ``IntervalSet``; a no-op returns the very same
object, so callers can detect "nothing happened" with an identity check.

Overlap uses closed-interval semantics: two intervals that merely touch
(``a.end == b.start``) overlap.  ``add`` does not check for overlap itself;
the gesture controllers run ``check_overlap`` first and decide.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Set
from dataclasses import dataclass, field
from typing import Any

from highlights.engine.colors import allocate_color
from highlights.engine.models import Interval, Token, new_interval_id
from highlights.utils.logging import debug


@dataclass(frozen=True)
class IntervalSet:
    intervals: tuple[Interval, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, intervals: Iterable[Interval]) -> IntervalSet:
        return cls(tuple(intervals))

    def __iter__(self) -> Iterator[Interval]:
        return iter(self.intervals)

    def __len__(self) -> int:
        return len(self.intervals)

    def __contains__(self, interval_id: object) -> bool:
        return any(h.id == interval_id for h in self.intervals)

    def get(self, interval_id: str) -> Interval | None:
        for h in self.intervals:
            if h.id == interval_id:
                return h
        return None

    def sorted(self) -> list[Interval]:
        return sorted(self.intervals, key=lambda h: (h.start, h.end))

    def used_colors(self) -> set[str]:
        return {h.color for h in self.intervals if h.color}

    # ── Mutations (pure) ─────────────────────────────────────────────────

    def add(self, start: float, end: float, used_colors: Set[str],
            color: str | None = None, interval_id: str | None = None,
            **allocator_opts: Any) -> tuple[IntervalSet, Interval]:
        new = Interval(
            id=interval_id or new_interval_id(),
            start=start,
            end=end,
            color=color or allocate_color(used_colors, **allocator_opts),
        )
        debug(f"Interval added: {new.id} [{start:.3f}, {end:.3f}] {new.color}")
        return IntervalSet(self.intervals + (new,)), new

    def remove(self, interval_id: str) -> IntervalSet:
        if interval_id not in self:
            return self
        return IntervalSet(tuple(h for h in self.intervals if h.id != interval_id))

    def update(self, interval_id: str, start: float, end: float) -> IntervalSet:
        if interval_id not in self:
            return self
        return IntervalSet(tuple(
            h.with_bounds(start, end) if h.id == interval_id else h
            for h in self.intervals
        ))

    # ── Queries ──────────────────────────────────────────────────────────

    def check_overlap(self, start: float, end: float, exclude_id: str | None = None) -> bool:
        return any(
            h.id != exclude_id and start <= h.end and end >= h.start
            for h in self.intervals
        )

    def find_covering(self, token: Token) -> Interval | None:
        for h in self.intervals:
            if h.contains_token(token):
                return h
        return None

    def conflicts(self) -> list[tuple[Interval, Interval]]:
        """Pairs of intervals that violate the non-overlap rule."""
        ordered = self.sorted()
        pairs = []
        for i, a in enumerate(ordered):
            for b in ordered[i + 1:]:
                if b.start > a.end:
                    break
                pairs.append((a, b))
        return pairs

    # ── Wire shape ───────────────────────────────────────────────────────

    def to_wire(self) -> list[dict[str, Any]]:
        return [h.to_dict() for h in self.intervals]

    @classmethod
    def from_wire(cls, items: Iterable[dict[str, Any]]) -> IntervalSet:
        return cls(tuple(Interval.from_dict(d) for d in items or []))


def check_overlap(start: float, end: float, intervals: IntervalSet,
                  exclude_id: str | None = None) -> bool:
    return intervals.check_overlap(start, end, exclude_id)


def find_covering(token: Token, intervals: IntervalSet) -> Interval | None:
    return intervals.find_covering(token)
