"""Editor session: routes begin/move/end gestures and reports committed changes.

The host forwards pointer input as token indices.  A press on a free token
starts a range selection; a press on the first or last token of a highlight
starts a boundary drag.  Only one gesture runs at a time.

``on_intervals_changed`` receives the full highlight list in wire shape once
per committed create/update/delete, never for previews.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from highlights.api.models import IntervalIn, ProjectDocument, SuggestionIn, TokenIn
from highlights.engine.drag import BoundaryDragController
from highlights.engine.grouping import GroupEntry, group_tokens
from highlights.engine.intervals import IntervalSet
from highlights.engine.selection import GestureOutcome, SelectionController, create_single_token
from highlights.engine.suggestions import SuggestionOverlay
from highlights.engine.tokens import TokenIndex
from highlights.utils.config import AppConfig
from highlights.utils.logging import debug, get_logger, set_session_id, warn

logger = get_logger(__name__)

IntervalsCallback = Callable[[list[dict[str, Any]]], None]
SuggestionCallback = Callable[[str], None]


class HighlightEditor:
    def __init__(
        self,
        tokens: TokenIndex,
        intervals: IntervalSet | None = None,
        suggestions: SuggestionOverlay | None = None,
        config: AppConfig | None = None,
        on_intervals_changed: IntervalsCallback | None = None,
        on_suggestion_accept: SuggestionCallback | None = None,
        on_suggestion_reject: SuggestionCallback | None = None,
        session_id: str = "",
    ) -> None:
        self.config = config or AppConfig()
        self.session_id = set_session_id(session_id)
        self.tokens = tokens
        self.intervals = intervals or IntervalSet()
        self.suggestions = suggestions or SuggestionOverlay()
        self.used_colors: set[str] = self.intervals.used_colors()
        self.on_intervals_changed = on_intervals_changed
        self.on_suggestion_accept = on_suggestion_accept
        self.on_suggestion_reject = on_suggestion_reject

        self._allocator_opts = self.config.colors.allocator_opts()
        self.selection = SelectionController(
            min_tokens=self.config.selection.min_tokens,
            allocator_opts=self._allocator_opts,
        )
        self.drag = BoundaryDragController(epsilon=self.config.drag.epsilon)

        for a, b in self.intervals.conflicts():
            warn(f"Loaded highlights overlap: {a.id} [{a.start}, {a.end}] / {b.id} [{b.start}, {b.end}]")

    @classmethod
    def from_wire(
        cls,
        words: Sequence[dict[str, Any]],
        highlights: Sequence[dict[str, Any]] = (),
        suggestions: Sequence[dict[str, Any]] = (),
        **kwargs: Any,
    ) -> HighlightEditor:
        """Validate host payloads and build an editor.

        Raises ``pydantic.ValidationError`` on malformed input.
        """
        doc = ProjectDocument(
            words=[TokenIn.model_validate(w) for w in words],
            highlights=[IntervalIn.model_validate(h) for h in highlights],
            suggestions=[SuggestionIn.model_validate(s) for s in suggestions],
        )
        return cls.from_document(doc, **kwargs)

    @classmethod
    def from_document(cls, doc: ProjectDocument | dict[str, Any], **kwargs: Any) -> HighlightEditor:
        if not isinstance(doc, ProjectDocument):
            doc = ProjectDocument.model_validate(doc)
        tokens = TokenIndex.from_words([w.model_dump() for w in doc.words])
        intervals = IntervalSet.from_wire([h.model_dump() for h in doc.highlights])
        overlay = SuggestionOverlay.from_wire([s.model_dump() for s in doc.suggestions])
        return cls(tokens, intervals, overlay, **kwargs)

    # ── State ────────────────────────────────────────────────────────────

    @property
    def active_gesture(self) -> str | None:
        if self.selection.is_active:
            return "selection"
        if self.drag.is_active:
            return "drag"
        return None

    def intervals_wire(self) -> list[dict[str, Any]]:
        return self.intervals.to_wire()

    def _commit(self, new_set: IntervalSet) -> None:
        self.intervals = new_set
        self.used_colors = new_set.used_colors()
        logger.info("Highlights changed: %d total", len(new_set))
        if self.on_intervals_changed:
            self.on_intervals_changed(new_set.to_wire())

    # ── Gestures ─────────────────────────────────────────────────────────

    def begin(self, token_index: int) -> bool:
        if self.active_gesture is not None:
            return False
        token = self.tokens.get(token_index)
        if token is None:
            return False
        if self.intervals.find_covering(token) is not None:
            return self.drag.begin(token, self.intervals)
        return self.selection.begin(token, self.intervals)

    def move(self, token_index: int) -> None:
        token = self.tokens.get(token_index)
        if token is None:
            return
        if self.selection.is_active:
            self.selection.move(token)
        elif self.drag.is_active:
            self.drag.move(token)

    def end(self) -> GestureOutcome:
        if self.selection.is_active:
            outcome = self.selection.end(self.intervals, self.used_colors)
        elif self.drag.is_active:
            outcome = self.drag.end(self.intervals)
        else:
            return GestureOutcome(self.intervals)

        if outcome.committed:
            self._commit(outcome.intervals)
        return outcome

    def cancel(self) -> None:
        self.selection.cancel()
        self.drag.cancel()

    def activate(self, token_index: int) -> bool:
        """Double-activate a token: accept its suggestion or make a one-token highlight."""
        if self.active_gesture is not None:
            return False
        token = self.tokens.get(token_index)
        if token is None or self.intervals.find_covering(token) is not None:
            return False

        suggestion = self.suggestions.find_for_token(token_index)
        if suggestion is not None:
            return self.accept_suggestion(suggestion.id)

        outcome = create_single_token(token, self.intervals, self.used_colors, **self._allocator_opts)
        if outcome.committed:
            self._commit(outcome.intervals)
        return outcome.committed

    def delete(self, interval_id: str) -> bool:
        if interval_id not in self.intervals:
            return False
        self._commit(self.intervals.remove(interval_id))
        return True

    # ── Suggestions ──────────────────────────────────────────────────────

    def set_suggestions(self, items: Sequence[dict[str, Any]]) -> None:
        validated = [SuggestionIn.model_validate(s).model_dump() for s in items]
        self.suggestions = SuggestionOverlay.from_wire(validated)

    def accept_suggestion(self, suggestion_id: str) -> bool:
        if self.suggestions.get(suggestion_id) is None:
            return False
        if self.on_suggestion_accept:
            self.on_suggestion_accept(suggestion_id)
            return True

        result = self.suggestions.accept(
            suggestion_id, self.intervals, self.used_colors, self.tokens, **self._allocator_opts
        )
        if not result.accepted:
            return False
        self.suggestions = result.overlay
        self._commit(result.intervals)
        return True

    def reject_suggestion(self, suggestion_id: str) -> bool:
        if self.suggestions.get(suggestion_id) is None:
            debug(f"Reject of unknown suggestion {suggestion_id} ignored")
            return False
        if self.on_suggestion_reject:
            self.on_suggestion_reject(suggestion_id)
            return True
        self.suggestions = self.suggestions.reject(suggestion_id)
        return True

    # ── Rendering support ────────────────────────────────────────────────

    def groups(self) -> list[GroupEntry]:
        preview = None
        if self.selection.is_active:
            preview = self.selection
        elif self.drag.is_active:
            preview = self.drag
        return group_tokens(self.tokens, self.intervals, preview=preview)

    def debug_info(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "token_count": len(self.tokens),
            "highlight_count": len(self.intervals),
            "highlights": [
                {
                    "id": h.id,
                    "start": h.start,
                    "end": h.end,
                    "color": h.color,
                    "token_count": len(self.tokens.tokens_in(h.start, h.end)),
                }
                for h in self.intervals.sorted()
            ],
            "used_colors": sorted(self.used_colors),
            "suggestion_count": len(self.suggestions),
            "active_gesture": self.active_gesture,
        }
