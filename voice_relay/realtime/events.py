"""Relay events: the closed vocabulary of upstream events forwarded to clients."""

from __future__ import annotations

from typing import Any, Union
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SpeechStarted:
    pass


@dataclass(frozen=True, slots=True)
class SpeechStopped:
    pass


@dataclass(frozen=True, slots=True)
class AudioDelta:
    # Base64 PCM16 exactly as the upstream sent it; never re-encoded.
    audio: str
    response_id: str | None = None
    item_id: str | None = None


@dataclass(frozen=True, slots=True)
class TextDelta:
    text: str
    response_id: str | None = None
    item_id: str | None = None


@dataclass(frozen=True, slots=True)
class ResponseComplete:
    response: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class UpstreamError:
    code: str | None
    message: str


RelayEvent = Union[SpeechStarted, SpeechStopped, AudioDelta, TextDelta, ResponseComplete, UpstreamError]

__all__ = [
    "AudioDelta",
    "RelayEvent",
    "ResponseComplete",
    "SpeechStarted",
    "SpeechStopped",
    "TextDelta",
    "UpstreamError",
]
