"""Tests for streaming schemas."""

from __future__ import annotations

import pytest

from chatstream.schemas.streaming import StreamChunk, StreamingPhase


class TestStreamChunk:
    def test_basic(self):
        chunk = StreamChunk(
            delta="hello",
            accumulated="hello",
            token_count=1,
        )
        assert chunk.delta == "hello"
        assert chunk.accumulated == "hello"
        assert chunk.token_count == 1
        assert chunk.is_complete is False

    def test_complete(self):
        chunk = StreamChunk(
            delta="",
            accumulated="full content",
            token_count=10,
            is_complete=True,
        )
        assert chunk.is_complete is True
        assert chunk.delta == ""

    def test_token_count_non_negative(self):
        with pytest.raises(ValueError):
            StreamChunk(delta="x", accumulated="x", token_count=-1)


class TestStreamingPhase:
    def test_exactly_four_phases(self):
        assert [p.value for p in StreamingPhase] == [
            "idle",
            "producing",
            "produced_awaiting_reveal",
            "settled",
        ]

    @pytest.mark.parametrize(
        ("phase", "streaming", "complete", "settled"),
        [
            (StreamingPhase.IDLE, False, False, False),
            (StreamingPhase.PRODUCING, True, False, False),
            (StreamingPhase.PRODUCED_AWAITING_REVEAL, True, True, False),
            (StreamingPhase.SETTLED, False, True, True),
        ],
    )
    def test_predicates(self, phase, streaming, complete, settled):
        assert phase.is_streaming is streaming
        assert phase.is_production_complete is complete
        assert phase.is_fully_settled is settled
