"""Core data types: tokens, intervals (highlights), suggestions, gesture state.

Intervals are anchored to timestamps, suggestions to token indices.
Conversions between the two happen only at ingress/egress (see tokens.py).
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any


def new_interval_id() -> str:
    return f"highlight_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _as_float(value: Any) -> float:
    try:
        return float(value or 0.0)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class Token:
    """A timestamped transcript word."""
    index: int
    text: str
    start: float
    end: float

    def to_dict(self) -> dict[str, Any]:
        return {"word": self.text, "start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, d: dict[str, Any], index: int) -> Token:
        # transcription output is not always complete; missing times read as 0
        return cls(
            index=index,
            text=str(d.get("word", d.get("text", ""))),
            start=_as_float(d.get("start")),
            end=_as_float(d.get("end")),
        )


@dataclass(frozen=True)
class Interval:
    """A committed highlight over [start, end] seconds."""
    id: str
    start: float
    end: float
    color: str

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains_token(self, token: Token) -> bool:
        return token.start >= self.start and token.end <= self.end

    def with_bounds(self, start: float, end: float) -> Interval:
        return Interval(id=self.id, start=start, end=end, color=self.color)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "start": self.start, "end": self.end, "color": self.color}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Interval:
        return cls(
            id=str(d.get("id") or new_interval_id()),
            start=_as_float(d.get("start")),
            end=_as_float(d.get("end")),
            color=str(d.get("color") or ""),
        )


@dataclass(frozen=True)
class Suggestion:
    """A proposed highlight in token-index coordinates."""
    id: str
    start_token: int
    end_token: int
    text: str = ""
    color: str = ""

    def covers(self, token_index: int) -> bool:
        return self.start_token <= token_index <= self.end_token

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start_token,
            "end": self.end_token,
            "text": self.text,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Suggestion:
        start, end = int(d.get("start", 0)), int(d.get("end", 0))
        return cls(
            id=str(d["id"]),
            start_token=min(start, end),
            end_token=max(start, end),
            text=str(d.get("text", "")),
            color=str(d.get("color") or ""),
        )


@dataclass(frozen=True)
class DragTarget:
    """Snapshot of the interval under a boundary drag."""
    interval_id: str
    is_start_handle: bool
    is_end_handle: bool
    original_start: float
    original_end: float

    @property
    def is_single_token(self) -> bool:
        return self.is_start_handle and self.is_end_handle


@dataclass(frozen=True)
class SelectionRange:
    anchor_time: float
    current_time: float

    @property
    def start(self) -> float:
        return min(self.anchor_time, self.current_time)

    @property
    def end(self) -> float:
        return max(self.anchor_time, self.current_time)
