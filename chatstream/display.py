"""Rich live display of streamed messages.

Subscribes to a StreamRegistry's events and renders each message's
revealed text in a panel whose border reflects the message phase.
Used by ``chatstream demo``; any other presentation layer can subscribe
to the same events.
"""

from __future__ import annotations

import time
from collections import deque

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from chatstream.events import EventListener
from chatstream.schemas.streaming import StreamEvent, StreamEventType, StreamingPhase

_PHASE_MARKUP: dict[StreamingPhase, str] = {
    StreamingPhase.IDLE: "[dim]○ idle[/dim]",
    StreamingPhase.PRODUCING: "[bold cyan]◉ producing[/bold cyan]",
    StreamingPhase.PRODUCED_AWAITING_REVEAL: "[bold yellow]◎ revealing[/bold yellow]",
    StreamingPhase.SETTLED: "[bold green]● settled[/bold green]",
}

_PHASE_BORDER: dict[StreamingPhase, str] = {
    StreamingPhase.IDLE: "dim",
    StreamingPhase.PRODUCING: "cyan",
    StreamingPhase.PRODUCED_AWAITING_REVEAL: "yellow",
    StreamingPhase.SETTLED: "green",
}


class RevealDisplay:
    """Live panel view of every message seen on the event stream.

    Use as a context manager to drive a Rich Live region, or call
    ``create_listener()`` alone and render the object yourself (it
    implements ``__rich__``).
    """

    def __init__(self, console: Console, *, show_cursor: bool = True) -> None:
        self._console = console
        self._show_cursor = show_cursor
        self._start_time = time.monotonic()
        self._texts: dict[str, str] = {}
        self._phases: dict[str, StreamingPhase] = {}
        self._activity_log: deque[tuple[float, str]] = deque(maxlen=20)
        self._live: Live | None = None

    def __enter__(self) -> RevealDisplay:
        self._start_time = time.monotonic()
        self._live = Live(
            self,
            console=self._console,
            auto_refresh=False,
            transient=False,
        )
        self._live.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        if self._live:
            self._live.__exit__(*args)
            self._live = None

    @property
    def activity(self) -> list[str]:
        return [line for _, line in self._activity_log]

    def phase(self, message_id: str) -> StreamingPhase:
        return self._phases.get(message_id, StreamingPhase.IDLE)

    def text(self, message_id: str) -> str:
        return self._texts.get(message_id, "")

    def create_listener(self) -> EventListener:
        """Create a listener for a registry or emitter."""

        def _handle(event: StreamEvent) -> None:
            self._handle_event(event)
            self._refresh()

        return _handle

    def _handle_event(self, event: StreamEvent) -> None:
        mid = event.message_id
        self._texts.setdefault(mid, "")
        self._phases.setdefault(mid, StreamingPhase.IDLE)

        if event.type == StreamEventType.PHASE_CHANGED and event.phase is not None:
            self._phases[mid] = event.phase
            self._log(f"{mid}: {event.phase.value}")
        elif event.type == StreamEventType.REVEAL_UPDATED:
            self._texts[mid] = event.text or ""
        elif event.type == StreamEventType.REVEAL_CAUGHT_UP:
            self._log(f"{mid}: reveal caught up")

    def _log(self, line: str) -> None:
        self._activity_log.append((time.monotonic() - self._start_time, line))

    def _refresh(self) -> None:
        if self._live:
            self._live.refresh()

    def _render_message(self, message_id: str) -> Panel:
        phase = self._phases[message_id]
        body = Text(self._texts[message_id])
        if self._show_cursor and phase.is_streaming:
            body.append("▌", style="bold")
        return Panel(
            body,
            title=f"[bold]{message_id}[/bold]",
            subtitle=_PHASE_MARKUP[phase],
            border_style=_PHASE_BORDER[phase],
        )

    def __rich__(self) -> Group:
        panels = [self._render_message(mid) for mid in self._texts]
        log = Text()
        for elapsed, line in self._activity_log:
            log.append(f"{elapsed:6.2f}s ", style="dim")
            log.append(line + "\n")
        return Group(*panels, log)
