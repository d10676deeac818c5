"""Tests for the suggestion overlay: lookup, accept, reject, conflict filtering."""

from __future__ import annotations

import pytest

from highlights.engine.intervals import IntervalSet
from highlights.engine.suggestions import SuggestionOverlay
from highlights.engine.tokens import TokenIndex

from tests.conftest import member_indices, span


@pytest.fixture
def overlay() -> SuggestionOverlay:
    return SuggestionOverlay.from_wire([
        {"id": "s1", "start": 0, "end": 1, "text": "Hello beautiful", "color": "#ffeb3b"},
        {"id": "s2", "start": 4, "end": 5, "text": "is a", "color": "#81c784"},
    ])


class TestOverlay:
    def test_self_overlap_dropped(self):
        o = SuggestionOverlay.from_wire([
            {"id": "s1", "start": 0, "end": 1},
            {"id": "s2", "start": 1, "end": 2},
            {"id": "s3", "start": 4, "end": 5},
        ])
        assert [s.id for s in o] == ["s1", "s3"]

    def test_reversed_indices_normalized(self):
        o = SuggestionOverlay.from_wire([{"id": "s1", "start": 3, "end": 1}])
        s = o.get("s1")
        assert (s.start_token, s.end_token) == (1, 3)

    def test_find_for_token(self, overlay):
        assert overlay.find_for_token(5).id == "s2"
        assert overlay.find_for_token(0).id == "s1"
        assert overlay.find_for_token(3) is None

    def test_wire_round_trip(self, overlay):
        assert SuggestionOverlay.from_wire(overlay.to_wire()) == overlay


class TestAccept:
    def test_accept_materializes_interval(self, tokens, overlay):
        result = overlay.accept("s2", IntervalSet(), set(), tokens)
        assert result.accepted
        assert (result.interval.start, result.interval.end) == (2.4, 2.8)
        assert member_indices(tokens, result.interval) == [4, 5]
        assert result.color == "#81c784"
        assert result.overlay.get("s2") is None
        assert overlay.get("s2") is not None

    def test_accept_allocates_when_color_in_use(self, tokens, overlay):
        result = overlay.accept("s2", IntervalSet(), {"#81c784"}, tokens)
        assert result.color == "#ffeb3b"

    def test_accept_conflict_keeps_suggestion(self, tokens, overlay):
        s = IntervalSet.of([span(tokens, 5, 6, "h1")])
        result = overlay.accept("s2", s, set(), tokens)
        assert not result.accepted
        assert result.overlay is overlay
        assert result.intervals is s

    def test_accept_unknown(self, tokens, overlay):
        result = overlay.accept("nope", IntervalSet(), set(), tokens)
        assert not result.accepted

    def test_accept_without_tokens(self, overlay):
        assert not overlay.accept("s1", IntervalSet(), set(), TokenIndex()).accepted

    def test_accept_accepts_suggestion_object(self, tokens, overlay):
        assert overlay.accept(overlay.get("s1"), IntervalSet(), set(), tokens).accepted


class TestReject:
    def test_reject_removes(self, overlay):
        after = overlay.reject("s1")
        assert [s.id for s in after] == ["s2"]
        assert len(overlay) == 2

    def test_reject_twice_is_noop(self, overlay):
        once = overlay.reject("s1")
        assert once.reject("s1") is once


class TestDropConflicting:
    def test_drops_suggestions_over_highlights(self, tokens, overlay):
        s = IntervalSet.of([span(tokens, 1, 2, "h1")])
        assert [x.id for x in overlay.drop_conflicting(s, tokens)] == ["s2"]

    def test_nothing_to_drop(self, tokens, overlay):
        assert overlay.drop_conflicting(IntervalSet(), tokens) is overlay
