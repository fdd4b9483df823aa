"""Streaming schemas for message lifecycle and incremental reveal.

Defines the phase enum tracked per message, the events broadcast on
phase and reveal changes, the StreamChunk envelope producers hand to
the registry, and the RevealConfig that paces the typewriter effect.
"""

from __future__ import annotations

import time
from enum import StrEnum

from pydantic import BaseModel, Field


class StreamingPhase(StrEnum):
    """Lifecycle phase of a streamed message."""

    IDLE = "idle"
    PRODUCING = "producing"
    PRODUCED_AWAITING_REVEAL = "produced_awaiting_reveal"
    SETTLED = "settled"

    @property
    def is_streaming(self) -> bool:
        """Whether the UI should still treat the message as streaming."""
        return self in (
            StreamingPhase.PRODUCING,
            StreamingPhase.PRODUCED_AWAITING_REVEAL,
        )

    @property
    def is_production_complete(self) -> bool:
        """Whether the producer has finished emitting text."""
        return self in (
            StreamingPhase.PRODUCED_AWAITING_REVEAL,
            StreamingPhase.SETTLED,
        )

    @property
    def is_fully_settled(self) -> bool:
        return self is StreamingPhase.SETTLED


class StreamEventType(StrEnum):
    """Types of events emitted by lifecycles and animators."""

    PHASE_CHANGED = "phase_changed"
    REVEAL_UPDATED = "reveal_updated"
    REVEAL_CAUGHT_UP = "reveal_caught_up"


class StreamEvent(BaseModel):
    """A single lifecycle or reveal event for one message."""

    type: StreamEventType = Field(description="Event type")
    message_id: str = Field(description="Identifier of the message concerned")
    phase: StreamingPhase | None = Field(
        default=None, description="New phase, set on phase_changed"
    )
    text: str | None = Field(
        default=None, description="Revealed text, set on reveal events"
    )
    timestamp: float = Field(
        default_factory=time.time,
        description="Unix timestamp when the event occurred",
    )


class StreamChunk(BaseModel):
    """A single chunk of streaming output from a producer."""

    delta: str = Field(description="New text in this chunk")
    accumulated: str = Field(description="Full text accumulated so far")
    token_count: int = Field(ge=0, description="Running output token count")
    is_complete: bool = Field(
        default=False, description="True on final chunk"
    )


class RevealConfig(BaseModel):
    """Pacing and policy settings for the typewriter reveal."""

    pace_interval: float = Field(
        default=0.015, gt=0.0, description="Seconds between reveal ticks"
    )
    chunk_size: int = Field(
        default=1, ge=1, description="Characters revealed per tick"
    )
    min_animated_length: int = Field(
        default=0,
        ge=0,
        description="Texts shorter than this are shown without animation",
    )
    history_limit: int = Field(
        default=0,
        ge=0,
        description="Events kept on the registry emitter (0 disables history)",
    )
