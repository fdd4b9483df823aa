"""Streaming state provider interface.

Presentation code asks a provider whether a message is streaming without
depending on the concrete view-model that tracks it. Hosts that never
stream use NullStreamingProvider.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from chatstream.schemas.streaming import StreamingPhase


@runtime_checkable
class StreamingStateProvider(Protocol):
    """Read-only view of per-message streaming state.

    Implementations must answer for unknown identifiers (not streaming,
    idle) instead of raising.
    """

    def is_streaming(self, message_id: str) -> bool: ...

    def state(self, message_id: str) -> StreamingPhase: ...


class NullStreamingProvider:
    """Provider for hosts without streaming support: nothing ever streams."""

    def is_streaming(self, message_id: str) -> bool:
        return False

    def state(self, message_id: str) -> StreamingPhase:
        return StreamingPhase.IDLE
