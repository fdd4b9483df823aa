"""chatstream schema definitions.

Pydantic v2 models and enums shared by the lifecycle, animator, and registry.
"""

from chatstream.schemas.streaming import (
    RevealConfig,
    StreamChunk,
    StreamEvent,
    StreamEventType,
    StreamingPhase,
)

__all__ = [
    "RevealConfig",
    "StreamChunk",
    "StreamEvent",
    "StreamEventType",
    "StreamingPhase",
]
