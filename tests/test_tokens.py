"""Tests for TokenIndex: time lookups, index/timestamp conversion, text extraction."""

from __future__ import annotations

from highlights.engine.tokens import TokenIndex


class TestLookups:
    def test_covering_token(self, tokens):
        assert tokens.covering_token(0.7).text == "beautiful"
        assert tokens.covering_token(2.3).index == 3  # end bound is inclusive

    def test_covering_token_in_pause(self, tokens):
        assert tokens.covering_token(1.25) is None

    def test_nearest_token_in_pause(self, tokens):
        assert tokens.nearest_token(1.25).index == 2
        assert tokens.nearest_token(1.9).index == 3

    def test_nearest_token_past_end(self, tokens):
        assert tokens.nearest_token(99.0).index == 6

    def test_empty_sequence(self):
        empty = TokenIndex()
        assert empty.nearest_token(1.0) is None
        assert empty.covering_token(1.0) is None
        assert empty.find_token_index(1.0) == -1

    def test_get_out_of_range(self, tokens):
        assert tokens.get(-1) is None
        assert tokens.get(7) is None
        assert tokens.get(0).text == "Hello"


class TestTimestampConversion:
    def test_calculate_timestamps(self, tokens):
        assert tokens.calculate_timestamps(1, 3) == (0.6, 2.3)

    def test_round_trip(self, tokens):
        start, end = tokens.calculate_timestamps(1, 3)
        assert tokens.find_token_index(start) == 1
        assert tokens.find_token_index(end) == 3
        assert tokens.calculate_timestamps(1, 3) == (start, end)

    def test_indices_are_clamped(self, tokens):
        assert tokens.calculate_timestamps(-5, 100) == (0.0, 3.3)

    def test_empty_sequence_yields_zero(self):
        assert TokenIndex().calculate_timestamps(0, 0) == (0.0, 0.0)

    def test_malformed_words_default_to_zero(self):
        idx = TokenIndex.from_words([
            {"word": "test1"},
            {"word": "test2", "start": 1.0},
            {"word": "test3", "end": 2.0},
            {"word": "test4", "start": 2.0, "end": 2.5},
        ])
        assert idx.calculate_timestamps(0, 3) == (0.0, 2.5)
        assert idx[1].end == 0.0

    def test_text_key_accepted(self):
        idx = TokenIndex.from_words([{"text": "hi", "start": 0, "end": 1}])
        assert idx[0].text == "hi"


class TestTextExtraction:
    def test_text_in_range(self, tokens):
        assert tokens.text_in(0.6, 1.8) == "beautiful world"

    def test_partial_token_excluded(self, tokens):
        assert tokens.text_in(0.6, 1.5) == "beautiful"

    def test_text_between(self, tokens):
        assert tokens.text_between(1, 3) == "beautiful world this"

    def test_text_between_invalid(self, tokens):
        assert tokens.text_between(3, 1) == ""
        assert tokens.text_between(-1, 2) == ""
        assert tokens.text_between(0, 7) == ""
