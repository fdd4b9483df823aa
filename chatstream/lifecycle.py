"""Streaming lifecycle state machine for a single message.

Tracks whether a message's content is still being produced, has finished
producing but is still being revealed, or is fully settled. Out-of-order
signals are tolerated as silent no-ops: in a streaming pipeline a
"production complete" may legitimately race a reset, and the reveal side
may catch up while the producer is still running.

    idle ──start──▶ producing ──complete──▶ produced_awaiting_reveal
      ▲                                           │
      │                                      caught up
    reset                                         ▼
      └──────────────────────────────────────── settled
"""

from __future__ import annotations

import logging

from chatstream.events import StreamEventEmitter
from chatstream.schemas.streaming import StreamEventType, StreamingPhase

logger = logging.getLogger(__name__)


class StreamingLifecycle:
    """Per-message phase tracker and single source of truth for "is this
    message still streaming, and has its presentation caught up".

    Every phase change is broadcast on ``emitter`` as a ``phase_changed``
    StreamEvent. ``reset`` and ``force_settle`` are unconditional and always
    broadcast, so callers can rely on them to drive a message to a
    consistent display state after an upstream failure.
    """

    def __init__(
        self,
        message_id: str,
        emitter: StreamEventEmitter | None = None,
    ) -> None:
        self._message_id = message_id
        self._phase = StreamingPhase.IDLE
        self._emitter = emitter or StreamEventEmitter()

    def __repr__(self) -> str:
        return f"StreamingLifecycle({self._message_id!r}, phase={self._phase.value})"

    # ── State ─────────────────────────────────────────────────

    @property
    def message_id(self) -> str:
        return self._message_id

    @property
    def phase(self) -> StreamingPhase:
        return self._phase

    @property
    def emitter(self) -> StreamEventEmitter:
        return self._emitter

    @property
    def is_considered_streaming(self) -> bool:
        """True while producing or while the reveal is still catching up."""
        return self._phase.is_streaming

    @property
    def is_production_complete(self) -> bool:
        return self._phase.is_production_complete

    @property
    def is_fully_settled(self) -> bool:
        return self._phase.is_fully_settled

    # ── Transitions ───────────────────────────────────────────

    def start_producing(self) -> None:
        """Begin (or restart) production. Valid from idle or settled."""
        if self._phase not in (StreamingPhase.IDLE, StreamingPhase.SETTLED):
            self._ignored("start_producing")
            return
        self._transition(StreamingPhase.PRODUCING)

    def mark_production_complete(self) -> None:
        """Record that the producer has emitted its final text."""
        if self._phase is not StreamingPhase.PRODUCING:
            self._ignored("mark_production_complete")
            return
        self._transition(StreamingPhase.PRODUCED_AWAITING_REVEAL)

    def mark_reveal_caught_up(self) -> None:
        """Record that the reveal has shown all text known so far.

        Only settles the message once production is complete. While the
        producer is still running the reveal will be fed more text, so the
        message stays streaming.
        """
        if self._phase is not StreamingPhase.PRODUCED_AWAITING_REVEAL:
            self._ignored("mark_reveal_caught_up")
            return
        self._transition(StreamingPhase.SETTLED)

    def reset(self) -> None:
        """Unconditionally return to idle."""
        self._transition(StreamingPhase.IDLE)

    def force_settle(self) -> None:
        """Unconditionally jump to settled (cleanup and error paths)."""
        self._transition(StreamingPhase.SETTLED)

    # ── Internals ─────────────────────────────────────────────

    def _transition(self, phase: StreamingPhase) -> None:
        previous = self._phase
        self._phase = phase
        logger.debug(
            "Message %s: %s -> %s", self._message_id, previous.value, phase.value
        )
        self._emitter.emit(
            StreamEventType.PHASE_CHANGED, self._message_id, phase=phase
        )

    def _ignored(self, signal: str) -> None:
        logger.debug(
            "Message %s: ignoring %s in phase %s",
            self._message_id,
            signal,
            self._phase.value,
        )
