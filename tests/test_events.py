"""Tests for stream event schemas and StreamEventEmitter."""

from __future__ import annotations

import logging

from chatstream.events import StreamEventEmitter
from chatstream.schemas.streaming import StreamEvent, StreamEventType, StreamingPhase

# ══════════════════════════════════════════════════════════════════
# StreamEvent Schema
# ══════════════════════════════════════════════════════════════════


class TestStreamEvent:
    def test_create_event_with_defaults(self):
        event = StreamEvent(type=StreamEventType.PHASE_CHANGED, message_id="m1")
        assert event.phase is None
        assert event.text is None
        assert event.timestamp > 0

    def test_event_serializes_to_dict(self):
        event = StreamEvent(
            type=StreamEventType.PHASE_CHANGED,
            message_id="m1",
            phase=StreamingPhase.SETTLED,
        )
        d = event.model_dump()
        assert d["type"] == "phase_changed"
        assert d["phase"] == "settled"
        assert d["message_id"] == "m1"


class TestStreamEventType:
    def test_all_event_types_exist(self):
        assert {e.value for e in StreamEventType} == {
            "phase_changed",
            "reveal_updated",
            "reveal_caught_up",
        }

    def test_event_type_is_string(self):
        assert StreamEventType.REVEAL_UPDATED == "reveal_updated"


# ══════════════════════════════════════════════════════════════════
# StreamEventEmitter
# ══════════════════════════════════════════════════════════════════


class TestStreamEventEmitter:
    def test_emit_calls_listener(self):
        emitter = StreamEventEmitter()
        received = []
        emitter.add_listener(received.append)

        event = emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text="Hi")

        assert received == [event]
        assert received[0].text == "Hi"

    def test_emit_with_no_listeners_no_error(self):
        emitter = StreamEventEmitter()
        emitter.emit(StreamEventType.PHASE_CHANGED, "m1", phase=StreamingPhase.IDLE)

    def test_delivery_is_ordered(self):
        emitter = StreamEventEmitter()
        order = []
        emitter.add_listener(lambda e: order.append(("a", e.text)))
        emitter.add_listener(lambda e: order.append(("b", e.text)))

        emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text="1")
        emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text="2")

        assert order == [("a", "1"), ("b", "1"), ("a", "2"), ("b", "2")]

    def test_remove_listener(self):
        emitter = StreamEventEmitter()
        received = []
        listener = received.append
        emitter.add_listener(listener)
        emitter.remove_listener(listener)

        emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text="x")

        assert received == []
        assert emitter.listener_count == 0

    def test_listener_exception_does_not_propagate(self, caplog):
        emitter = StreamEventEmitter()
        received = []

        def bad_listener(event):
            raise RuntimeError("boom")

        emitter.add_listener(bad_listener)
        emitter.add_listener(received.append)

        with caplog.at_level(logging.ERROR, logger="chatstream.events"):
            emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text="x")

        assert len(received) == 1
        assert "Event listener error" in caplog.text

    def test_listener_added_during_dispatch_sees_next_event(self):
        emitter = StreamEventEmitter()
        late = []

        def adder(event):
            if not late and emitter.listener_count == 1:
                emitter.add_listener(late.append)

        emitter.add_listener(adder)
        emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text="1")
        assert late == []
        emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text="2")
        assert [e.text for e in late] == ["2"]

    def test_history_disabled_by_default(self):
        emitter = StreamEventEmitter()
        emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text="x")
        assert emitter.history == []

    def test_history_is_bounded(self):
        emitter = StreamEventEmitter(history_limit=2)
        for text in ("a", "b", "c"):
            emitter.emit(StreamEventType.REVEAL_UPDATED, "m1", text=text)
        assert [e.text for e in emitter.history] == ["b", "c"]
