from .bridge import RealtimeBridge
from .client import UpstreamSessionClient
from .events import (
    TextDelta,
    AudioDelta,
    RelayEvent,
    SpeechStarted,
    SpeechStopped,
    UpstreamError,
    ResponseComplete,
)

__all__ = [
    "AudioDelta",
    "RealtimeBridge",
    "RelayEvent",
    "ResponseComplete",
    "SpeechStarted",
    "SpeechStopped",
    "TextDelta",
    "UpstreamError",
    "UpstreamSessionClient",
]
