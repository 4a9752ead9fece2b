from __future__ import annotations

import json

import pytest

from voice_relay.errors import UpstreamProtocolError
from voice_relay.realtime.translate import parse_upstream_event, translate_upstream_event
from voice_relay.realtime.events import (
    TextDelta,
    AudioDelta,
    SpeechStarted,
    SpeechStopped,
    UpstreamError,
    ResponseComplete,
)


def _translate(event: dict):
    return translate_upstream_event(parse_upstream_event(json.dumps(event)))


def test_speech_events_translate_immediately() -> None:
    assert _translate({"type": "input_audio_buffer.speech_started"}) == SpeechStarted()
    assert _translate({"type": "input_audio_buffer.speech_stopped"}) == SpeechStopped()


def test_audio_delta_is_passed_through_unchanged() -> None:
    delta = "AAECAwQF+/8="
    event = _translate({"type": "response.audio.delta", "delta": delta, "response_id": "r1", "item_id": "i1"})
    assert event == AudioDelta(audio=delta, response_id="r1", item_id="i1")


def test_text_delta() -> None:
    assert _translate({"type": "response.text.delta", "delta": "hi"}) == TextDelta(text="hi")


def test_response_done_carries_response_object() -> None:
    event = _translate({"type": "response.done", "response": {"id": "r1", "status": "completed"}})
    assert event == ResponseComplete(response={"id": "r1", "status": "completed"})


def test_error_event_maps_code_and_message() -> None:
    event = _translate({"type": "error", "error": {"type": "invalid_request_error", "code": "bad", "message": "nope"}})
    assert event == UpstreamError(code="bad", message="nope")


def test_error_event_without_message_gets_default() -> None:
    event = _translate({"type": "error", "error": {"type": "server_error"}})
    assert event == UpstreamError(code="server_error", message="Upstream service error")


@pytest.mark.parametrize("event_type", ["session.created", "session.updated", "rate_limits.updated", "response.created"])
def test_unknown_events_are_ignored(event_type: str) -> None:
    assert _translate({"type": event_type}) is None


@pytest.mark.parametrize("raw", ["{not json", "[]", json.dumps({"delta": "x"}), json.dumps({"type": ""})])
def test_parse_rejects_malformed_frames(raw: str) -> None:
    with pytest.raises(UpstreamProtocolError):
        parse_upstream_event(raw)


@pytest.mark.parametrize(
    "event",
    [
        {"type": "response.audio.delta", "delta": 12},
        {"type": "response.text.delta"},
        {"type": "response.done", "response": "done"},
        {"type": "error"},
    ],
)
def test_known_events_with_wrong_shape_raise(event: dict) -> None:
    with pytest.raises(UpstreamProtocolError):
        translate_upstream_event(event)
