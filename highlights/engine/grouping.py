"""Group tokens into display runs: one entry per highlight, one per free token."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from highlights.engine.intervals import IntervalSet
from highlights.engine.models import Interval, Token


class PreviewSource(Protocol):
    def preview_intervals(self, intervals: IntervalSet) -> IntervalSet: ...


@dataclass
class TokenEntry:
    token: Token
    index: int
    type: str = "token"


@dataclass
class IntervalEntry:
    interval: Interval
    start_index: int
    members: list[Token] = field(default_factory=list)
    type: str = "interval"

    @property
    def end_index(self) -> int:
        return self.start_index + len(self.members) - 1

    @property
    def text(self) -> str:
        return " ".join(t.text for t in self.members)


GroupEntry = TokenEntry | IntervalEntry


def group_tokens(tokens: Iterable[Token], intervals: IntervalSet,
                 preview: PreviewSource | None = None) -> list[GroupEntry]:
    """Single left-to-right scan merging consecutive tokens of the same highlight.

    With ``preview`` (an in-progress gesture) the runs reflect the pending
    selection or the candidate drag bounds instead of the committed ones.
    """
    if preview is not None:
        intervals = preview.preview_intervals(intervals)

    groups: list[GroupEntry] = []
    current: IntervalEntry | None = None
    for i, tok in enumerate(tokens):
        h = intervals.find_covering(tok)
        if h is None:
            current = None
            groups.append(TokenEntry(token=tok, index=i))
        elif current is not None and current.interval.id == h.id:
            current.members.append(tok)
        else:
            current = IntervalEntry(interval=h, start_index=i, members=[tok])
            groups.append(current)
    return groups
