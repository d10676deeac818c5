"""Range-selection gesture: begin on a free token, drag, release to create.

States: idle -> selecting -> (committed | discarded) -> idle.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any

from highlights.engine.intervals import IntervalSet
from highlights.engine.models import Interval, SelectionRange, Token
from highlights.utils.logging import debug

PENDING_SELECTION_ID = "__selection__"


class SelectionState(str, Enum):
    IDLE = "idle"
    SELECTING = "selecting"


@dataclass
class GestureOutcome:
    """Result of finishing a gesture; ``intervals`` is the input set when nothing changed."""
    intervals: IntervalSet
    committed: bool = False
    interval: Interval | None = None


def create_single_token(token: Token, intervals: IntervalSet, used_colors: Set[str],
                        **allocator_opts: Any) -> GestureOutcome:
    """Direct (double-activate) creation of a one-token interval."""
    if intervals.find_covering(token) is not None:
        return GestureOutcome(intervals)
    if intervals.check_overlap(token.start, token.end):
        debug(f"Single-token highlight on '{token.text}' rejected: overlap")
        return GestureOutcome(intervals)
    new_set, new = intervals.add(token.start, token.end, used_colors, **allocator_opts)
    return GestureOutcome(new_set, committed=True, interval=new)


class SelectionController:
    def __init__(self, min_tokens: int = 2,
                 on_change: Callable[[IntervalSet], None] | None = None,
                 allocator_opts: dict[str, Any] | None = None) -> None:
        self.min_tokens = min_tokens
        self.on_change = on_change
        self.allocator_opts = allocator_opts or {}
        self.state = SelectionState.IDLE
        self.anchor: Token | None = None
        self.current: Token | None = None
        self.range: SelectionRange | None = None

    @property
    def is_active(self) -> bool:
        return self.state is SelectionState.SELECTING

    def begin(self, token: Token, intervals: IntervalSet) -> bool:
        if self.is_active or intervals.find_covering(token) is not None:
            return False
        self.state = SelectionState.SELECTING
        self.anchor = self.current = token
        self.range = SelectionRange(anchor_time=token.start, current_time=token.end)
        return True

    def move(self, token: Token) -> SelectionRange | None:
        if not self.is_active or self.anchor is None:
            return None
        self.current = token
        # the anchor token stays inside the range whichever way the pointer goes
        if token.start >= self.anchor.start:
            self.range = SelectionRange(anchor_time=self.anchor.start, current_time=token.end)
        else:
            self.range = SelectionRange(anchor_time=self.anchor.end, current_time=token.start)
        return self.range

    def token_span(self) -> int:
        if self.anchor is None or self.current is None:
            return 0
        return abs(self.current.index - self.anchor.index) + 1

    def end(self, intervals: IntervalSet, used_colors: Set[str]) -> GestureOutcome:
        if not self.is_active or self.range is None:
            self.cancel()
            return GestureOutcome(intervals)

        start, end = self.range.start, self.range.end
        span = self.token_span()
        self.cancel()

        if not (math.isfinite(start) and math.isfinite(end)) or start >= end:
            debug(f"Selection discarded: empty range [{start}, {end}]")
            return GestureOutcome(intervals)
        if span < self.min_tokens:
            return GestureOutcome(intervals)
        if intervals.check_overlap(start, end):
            debug(f"Selection discarded: [{start:.3f}, {end:.3f}] overlaps a highlight")
            return GestureOutcome(intervals)

        new_set, new = intervals.add(start, end, used_colors, **self.allocator_opts)
        if self.on_change:
            self.on_change(new_set)
        return GestureOutcome(new_set, committed=True, interval=new)

    def cancel(self) -> None:
        self.state = SelectionState.IDLE
        self.anchor = self.current = None
        self.range = None

    # ── Preview ──────────────────────────────────────────────────────────

    def is_in_selection(self, token: Token) -> bool:
        if not self.is_active or self.range is None:
            return False
        return token.start >= self.range.start and token.end <= self.range.end

    def preview_intervals(self, intervals: IntervalSet) -> IntervalSet:
        if not self.is_active or self.range is None:
            return intervals
        pending = Interval(PENDING_SELECTION_ID, self.range.start, self.range.end, "")
        return IntervalSet(intervals.intervals + (pending,))
