"""Typewriter reveal animator for streamed message text.

Exposes a growing text buffer a few characters at a time at a constant
pace, independent of how fast or unevenly the producer delivers it.
Ticks are scheduled one at a time with ``call_later`` on the running
asyncio loop (or any object with the same method), so cancelling the
single outstanding handle stops the reveal immediately.

Characters are counted as extended grapheme clusters, so combining
marks, emoji ZWJ sequences and flags are never split across ticks.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

import regex

from chatstream.events import StreamEventEmitter
from chatstream.lifecycle import StreamingLifecycle
from chatstream.schemas.streaming import RevealConfig, StreamEventType, StreamingPhase

logger = logging.getLogger(__name__)

_GRAPHEME_RE = regex.compile(r"\X")


def split_graphemes(text: str) -> list[str]:
    """Split text into user-perceived characters."""
    return _GRAPHEME_RE.findall(text)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay (e.g. an asyncio loop)."""

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> TimerHandle: ...


class RevealAnimator:
    """Paced, cancelable, resumable reveal of one message's text.

    Feed it the full accumulated text whenever it changes. Extensions of
    the revealed prefix continue from where the reveal is; anything else
    restarts from empty. When the reveal catches up with the latest text
    and the bound lifecycle's production is complete, the animator emits
    ``reveal_caught_up`` and settles the lifecycle.

    Args:
        message_id: Identifier of the message being revealed.
        config: Pace and chunk settings. Defaults to RevealConfig().
        lifecycle: Lifecycle to settle once the reveal catches up.
        emitter: Emitter for reveal events. Defaults to the lifecycle's.
        scheduler: Object providing ``call_later``. Defaults to the
            running asyncio loop, looked up when a tick is scheduled.
        animated: Whether the typewriter path applies. When False every
            feed shows its text at once.
        on_complete: Called whenever a tick process ends, whether it
            caught up or was cancelled.
    """

    def __init__(
        self,
        message_id: str,
        *,
        config: RevealConfig | None = None,
        lifecycle: StreamingLifecycle | None = None,
        emitter: StreamEventEmitter | None = None,
        scheduler: Scheduler | None = None,
        animated: bool = True,
        on_complete: Callable[[], Any] | None = None,
    ) -> None:
        self._message_id = message_id
        self._config = config or RevealConfig()
        self._lifecycle = lifecycle
        if emitter is None:
            emitter = lifecycle.emitter if lifecycle else StreamEventEmitter()
        self._emitter = emitter
        self._scheduler = scheduler
        self._animated = animated
        self._on_complete = on_complete

        self._full_text = ""
        self._revealed = ""
        self._pending: list[str] = []
        self._pending_index = 0
        self._handle: TimerHandle | None = None
        self._active = False
        self._generation = 0
        self._tick_count = 0
        self._production_complete = False

    def __repr__(self) -> str:
        return (
            f"RevealAnimator({self._message_id!r}, "
            f"revealed={len(self._revealed)}/{len(self._full_text)}, "
            f"active={self._active})"
        )

    # ── State ─────────────────────────────────────────────────

    @property
    def message_id(self) -> str:
        return self._message_id

    @property
    def full_text(self) -> str:
        return self._full_text

    @property
    def revealed_text(self) -> str:
        return self._revealed

    @property
    def is_active(self) -> bool:
        """Whether a tick is currently scheduled."""
        return self._active

    @property
    def is_caught_up(self) -> bool:
        return not self._active and self._revealed == self._full_text

    @property
    def pace_interval(self) -> float:
        return self._config.pace_interval

    @property
    def chunk_size(self) -> int:
        return self._config.chunk_size

    @property
    def tick_count(self) -> int:
        """Ticks fired since the reveal last (re)started from empty."""
        return self._tick_count

    @property
    def animated(self) -> bool:
        return self._animated

    @animated.setter
    def animated(self, value: bool) -> None:
        self._animated = value

    # ── Inbound ───────────────────────────────────────────────

    def feed(self, new_text: str | None, *, animate: bool | None = None) -> None:
        """Hand the animator the latest full text for the message.

        Args:
            new_text: Full accumulated text. Empty or None clears the reveal.
            animate: Per-call override of ``animated``.
        """
        if not new_text:
            self.clear()
            return

        use_animation = self._animated if animate is None else animate
        if not use_animation:
            self._show_static(new_text)
            return

        if new_text == self._revealed:
            if new_text != self._full_text:
                # Text was cut back to exactly what is already shown.
                self._set_full_text(new_text)
                self._caught_up()
            return

        if new_text.startswith(self._revealed):
            if new_text != self._full_text:
                self._set_full_text(new_text)
            if not self._active:
                self._start_ticking()
            return

        self._restart(new_text)

    def clear(self) -> None:
        """Drop all text and production state, and stop ticking."""
        self._stop()
        self._production_complete = False
        self._full_text = ""
        self._pending = []
        self._pending_index = 0
        self._tick_count = 0
        self._update_revealed("")

    def cancel(self) -> None:
        """Stop any in-flight reveal. No tick fires after this returns.

        The completion callback is always invoked so timer owners can
        release resources deterministically. The next ``feed`` resumes.
        """
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._active = False
        logger.debug("Reveal %s cancelled", self._message_id)
        self._notify_complete()

    def skip_to_end(self) -> None:
        """Reveal the rest of the text at once."""
        self._stop()
        self._pending_index = len(self._pending)
        self._update_revealed(self._full_text)
        self._signal_if_production_complete()

    def notify_production_complete(self) -> None:
        """Tell the animator the producer will send no more text.

        If the reveal has already caught up there will be no further tick
        to report it, so the caught-up signal is sent right away.
        """
        self._production_complete = True
        if self.is_caught_up:
            self._signal_if_production_complete()

    def sync_with_phase(self, phase: StreamingPhase) -> None:
        """Align the reveal with a lifecycle phase change.

        While streaming, an unfinished reveal is resumed. Once the
        message is idle or settled the full text is shown statically.
        """
        if phase.is_streaming and self._animated:
            if self._revealed == self._full_text:
                if phase is StreamingPhase.PRODUCED_AWAITING_REVEAL:
                    self._signal_if_production_complete()
            elif not self._full_text.startswith(self._revealed):
                self._restart(self._full_text)
            elif not self._active:
                self._start_ticking()
            return

        self._stop()
        self._pending_index = len(self._pending)
        self._update_revealed(self._full_text)

    # ── Ticking ───────────────────────────────────────────────

    def _restart(self, new_text: str) -> None:
        self._stop()
        self._tick_count = 0
        self._update_revealed("")
        self._set_full_text(new_text)
        self._start_ticking()

    def _set_full_text(self, text: str) -> None:
        self._full_text = text
        self._pending = split_graphemes(text[len(self._revealed):])
        self._pending_index = 0

    def _start_ticking(self) -> None:
        self._generation += 1
        self._schedule_next()
        self._active = True

    def _schedule_next(self) -> None:
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._handle = scheduler.call_later(
            self._config.pace_interval, self._tick, self._generation
        )

    def _tick(self, generation: int) -> None:
        if generation != self._generation or not self._active:
            return
        self._handle = None

        start = self._pending_index
        chunk = self._pending[start:start + self._config.chunk_size]
        self._pending_index = start + len(chunk)
        self._tick_count += 1
        self._update_revealed(self._revealed + "".join(chunk))

        # A listener may have fed, cancelled or restarted the reveal.
        if generation != self._generation:
            return

        if self._pending_index >= len(self._pending):
            self._caught_up()
        else:
            self._schedule_next()

    def _caught_up(self) -> None:
        self._stop()
        logger.debug(
            "Reveal %s caught up after %d ticks", self._message_id, self._tick_count
        )
        self._signal_if_production_complete()

    def _stop(self) -> None:
        """End the current tick process, notifying only if one was running."""
        if not self._active and self._handle is None:
            return
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._active = False
        self._notify_complete()

    def _show_static(self, text: str) -> None:
        was_shown = self.is_caught_up and self._revealed == text
        self._stop()
        self._full_text = text
        self._pending = []
        self._pending_index = 0
        self._update_revealed(text)
        if not was_shown:
            self._signal_if_production_complete()

    # ── Outbound ──────────────────────────────────────────────

    def _production_is_complete(self) -> bool:
        if self._lifecycle is not None:
            return self._lifecycle.is_production_complete
        return self._production_complete

    def _signal_if_production_complete(self) -> None:
        if not self._production_is_complete():
            return
        self._emitter.emit(
            StreamEventType.REVEAL_CAUGHT_UP, self._message_id, text=self._revealed
        )
        if self._lifecycle is not None:
            self._lifecycle.mark_reveal_caught_up()

    def _update_revealed(self, text: str) -> None:
        if text == self._revealed:
            return
        self._revealed = text
        self._emitter.emit(
            StreamEventType.REVEAL_UPDATED, self._message_id, text=text
        )

    def _notify_complete(self) -> None:
        if self._on_complete is None:
            return
        try:
            self._on_complete()
        except Exception:
            logger.exception("Reveal completion callback failed for %s", self._message_id)
