"""chatstream — streaming message lifecycle and typewriter reveal."""

__version__ = "0.1.0"

from .events import StreamEventEmitter
from .lifecycle import StreamingLifecycle
from .providers import NullStreamingProvider, StreamingStateProvider
from .registry import StreamRegistry
from .reveal import RevealAnimator
from .schemas import (
    RevealConfig,
    StreamChunk,
    StreamEvent,
    StreamEventType,
    StreamingPhase,
)

__all__ = [
    "NullStreamingProvider",
    "RevealAnimator",
    "RevealConfig",
    "StreamChunk",
    "StreamEvent",
    "StreamEventEmitter",
    "StreamEventType",
    "StreamRegistry",
    "StreamingLifecycle",
    "StreamingPhase",
    "StreamingStateProvider",
]
