"""Per-message registry of streaming lifecycles and reveal animators.

The registry is the boundary between a content producer (an inference
session pushing deltas) and a presentation layer (anything that paints
revealed text). Entries are created lazily on the first inbound call for
a message and live until released. Queries never create entries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

from chatstream.events import EventListener, StreamEventEmitter
from chatstream.lifecycle import StreamingLifecycle
from chatstream.reveal import RevealAnimator, Scheduler, split_graphemes
from chatstream.schemas.streaming import (
    RevealConfig,
    StreamChunk,
    StreamingPhase,
)

logger = logging.getLogger(__name__)


@dataclass
class MessageStream:
    """Lifecycle, animator and accumulated text for one message."""

    lifecycle: StreamingLifecycle
    animator: RevealAnimator
    text: str = ""


class StreamRegistry:
    """Tracks the streaming state and reveal of every live message.

    All methods must be called from the thread running the event loop
    that drives the reveal ticks. Every lifecycle and animator shares the
    registry's emitter, so a single subscription sees phase changes and
    reveal updates for all messages in the order they happened.

    Args:
        config: Reveal pacing and policy. Defaults to RevealConfig().
        scheduler: Tick scheduler passed to every animator. Defaults to
            the running asyncio loop.
        animated: Whether streamed messages use the typewriter effect.
        on_reveal_complete: Called with the message id whenever a
            message's tick process ends.
    """

    def __init__(
        self,
        config: RevealConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
        animated: bool = True,
        on_reveal_complete: Callable[[str], Any] | None = None,
    ) -> None:
        self._config = config or RevealConfig()
        self._scheduler = scheduler
        self._animated = animated
        self._on_reveal_complete = on_reveal_complete
        self._emitter = StreamEventEmitter(history_limit=self._config.history_limit)
        self._streams: dict[str, MessageStream] = {}

    @property
    def config(self) -> RevealConfig:
        return self._config

    @property
    def emitter(self) -> StreamEventEmitter:
        return self._emitter

    # ── Subscriptions ─────────────────────────────────────────

    def subscribe(self, listener: EventListener) -> None:
        """Receive phase_changed, reveal_updated and reveal_caught_up events."""
        self._emitter.add_listener(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        self._emitter.remove_listener(listener)

    # ── Inbound ───────────────────────────────────────────────

    def start_producing(self, message_id: str) -> None:
        """Mark a message as being produced, creating it if needed.

        Restarting a settled message starts a new reply, so the previous
        text is dropped before the first delta arrives.
        """
        stream = self._get_or_create(message_id)
        was_settled = stream.lifecycle.phase is StreamingPhase.SETTLED
        stream.lifecycle.start_producing()
        if was_settled and stream.lifecycle.is_considered_streaming:
            stream.text = ""

    def append_or_replace_text(self, message_id: str, text: str) -> None:
        """Set the full accumulated text of a message."""
        stream = self._get_or_create(message_id)
        stream.text = text
        stream.animator.feed(text, animate=self._should_animate(stream))

    def append_text(self, message_id: str, delta: str) -> None:
        """Append a text delta to a message's accumulated text."""
        if not delta:
            return
        stream = self._get_or_create(message_id)
        self.append_or_replace_text(message_id, stream.text + delta)

    def ingest(self, message_id: str, chunk: StreamChunk) -> None:
        """Apply a producer chunk; a final chunk completes production."""
        self.append_or_replace_text(message_id, chunk.accumulated)
        if chunk.is_complete:
            self.mark_production_complete(message_id)

    def mark_production_complete(self, message_id: str) -> None:
        stream = self._get_or_create(message_id)
        stream.lifecycle.mark_production_complete()
        stream.animator.notify_production_complete()

    def reset(self, message_id: str) -> None:
        """Discard a message's text and return it to idle."""
        stream = self._get_or_create(message_id)
        stream.text = ""
        stream.animator.clear()
        stream.lifecycle.reset()

    def force_settle(self, message_id: str) -> None:
        """Settle a message and show its full text, whatever its phase."""
        stream = self._get_or_create(message_id)
        stream.lifecycle.force_settle()
        stream.animator.sync_with_phase(StreamingPhase.SETTLED)

    def skip_animation(self, message_id: str) -> None:
        """Reveal the rest of a message's text at once."""
        stream = self._streams.get(message_id)
        if stream is not None:
            stream.animator.skip_to_end()

    def release(self, message_id: str) -> None:
        """Stop a message's reveal and forget it."""
        stream = self._streams.pop(message_id, None)
        if stream is None:
            return
        stream.animator.cancel()
        logger.debug("Released message %s", message_id)

    def release_all(self) -> None:
        for message_id in list(self._streams):
            self.release(message_id)

    # ── Outbound ──────────────────────────────────────────────

    def is_streaming(self, message_id: str) -> bool:
        return self.state(message_id).is_streaming

    def state(self, message_id: str) -> StreamingPhase:
        stream = self._streams.get(message_id)
        if stream is None:
            return StreamingPhase.IDLE
        return stream.lifecycle.phase

    def revealed_text(self, message_id: str) -> str:
        stream = self._streams.get(message_id)
        if stream is None:
            return ""
        return stream.animator.revealed_text

    def message_ids(self) -> list[str]:
        return list(self._streams)

    def get(self, message_id: str) -> MessageStream | None:
        return self._streams.get(message_id)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._streams

    def __len__(self) -> int:
        return len(self._streams)

    # ── Internals ─────────────────────────────────────────────

    def _should_animate(self, stream: MessageStream) -> bool:
        if not self._animated or not stream.lifecycle.is_considered_streaming:
            return False
        return len(split_graphemes(stream.text)) >= self._config.min_animated_length

    def _get_or_create(self, message_id: str) -> MessageStream:
        stream = self._streams.get(message_id)
        if stream is not None:
            return stream

        lifecycle = StreamingLifecycle(message_id, emitter=self._emitter)
        on_complete = None
        if self._on_reveal_complete is not None:
            on_complete = partial(self._on_reveal_complete, message_id)

        animator = RevealAnimator(
            message_id,
            config=self._config,
            lifecycle=lifecycle,
            scheduler=self._scheduler,
            animated=self._animated,
            on_complete=on_complete,
        )
        stream = MessageStream(lifecycle=lifecycle, animator=animator)
        self._streams[message_id] = stream
        logger.debug("Tracking message %s", message_id)
        return stream
