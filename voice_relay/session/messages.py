"""Client-facing messages for upstream relay events."""

from __future__ import annotations

from typing import Any

from voice_relay.config.websocket import (
    MSG_ERROR,
    MSG_TEXT_RESPONSE,
    MSG_AUDIO_RESPONSE,
    MSG_SPEECH_STARTED,
    MSG_SPEECH_STOPPED,
    MSG_RESPONSE_COMPLETE,
)
from voice_relay.handlers.websocket.errors import build_envelope
from voice_relay.realtime.events import (
    TextDelta,
    AudioDelta,
    RelayEvent,
    SpeechStarted,
    SpeechStopped,
    UpstreamError,
    ResponseComplete,
)


def relay_event_to_message(event: RelayEvent) -> dict[str, Any]:
    if isinstance(event, AudioDelta):
        return build_envelope(
            MSG_AUDIO_RESPONSE,
            payload={"audio": event.audio, "response_id": event.response_id, "item_id": event.item_id},
        )
    if isinstance(event, TextDelta):
        return build_envelope(
            MSG_TEXT_RESPONSE,
            payload={"text": event.text, "response_id": event.response_id, "item_id": event.item_id},
        )
    if isinstance(event, SpeechStarted):
        return build_envelope(MSG_SPEECH_STARTED)
    if isinstance(event, SpeechStopped):
        return build_envelope(MSG_SPEECH_STOPPED)
    if isinstance(event, ResponseComplete):
        return build_envelope(MSG_RESPONSE_COMPLETE, payload={"response": event.response})
    if isinstance(event, UpstreamError):
        return build_envelope(MSG_ERROR, message=event.message, payload={"code": event.code, "message": event.message})
    raise TypeError(f"unsupported relay event: {type(event).__name__}")


__all__ = ["relay_event_to_message"]
