"""Stream event emitter for lifecycle and reveal notifications.

Lifecycles and animators own an emitter and broadcast StreamEvents on it
whenever a message changes phase or its revealed text moves. Delivery is
synchronous and in emission order, so listeners observe transitions
exactly as they happened.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from chatstream.schemas.streaming import StreamEvent, StreamEventType, StreamingPhase

logger = logging.getLogger(__name__)


# Type alias for event listener callbacks
EventListener = Callable[[StreamEvent], Any]


class StreamEventEmitter:
    """Broadcasts stream events to registered listeners.

    Listeners are plain callables invoked in registration order. A listener
    registered or removed while an event is being dispatched takes effect
    from the next event. Listener exceptions are logged but never propagate
    to the component that emitted the event.
    """

    def __init__(self, history_limit: int = 0) -> None:
        self._listeners: list[EventListener] = []
        self._history: deque[StreamEvent] = deque(maxlen=history_limit)

    @property
    def history(self) -> list[StreamEvent]:
        """Most recent events (for late-subscribing consumers)."""
        return list(self._history)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: EventListener) -> None:
        """Register a listener to receive stream events."""
        self._listeners.append(listener)

    def remove_listener(self, listener: EventListener) -> None:
        """Remove a previously registered listener."""
        self._listeners = [ln for ln in self._listeners if ln is not listener]

    def emit(
        self,
        event_type: StreamEventType,
        message_id: str,
        *,
        phase: StreamingPhase | None = None,
        text: str | None = None,
    ) -> StreamEvent:
        """Emit a stream event to all registered listeners.

        Returns the event that was dispatched.
        """
        event = StreamEvent(
            type=event_type, message_id=message_id, phase=phase, text=text
        )
        self._history.append(event)

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Event listener error for %s (%s)", event_type, message_id
                )
        return event
