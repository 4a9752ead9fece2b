"""Translate upstream realtime protocol events into relay events."""

from __future__ import annotations

import logging
from typing import Any

import orjson

from voice_relay.errors import UpstreamProtocolError
from voice_relay.config.upstream import (
    EVT_ERROR,
    EVT_TEXT_DELTA,
    EVT_AUDIO_DELTA,
    EVT_RESPONSE_DONE,
    EVT_SPEECH_STARTED,
    EVT_SPEECH_STOPPED,
)

from .events import (
    TextDelta,
    AudioDelta,
    RelayEvent,
    SpeechStarted,
    SpeechStopped,
    UpstreamError,
    ResponseComplete,
)

logger = logging.getLogger(__name__)


def parse_upstream_event(raw: str | bytes) -> dict[str, Any]:
    try:
        event = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise UpstreamProtocolError(f"invalid JSON from upstream: {exc}") from exc

    if not isinstance(event, dict):
        raise UpstreamProtocolError("upstream event must be a JSON object")

    event_type = event.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise UpstreamProtocolError("upstream event missing non-empty 'type'")
    return event


def _optional_str(event: dict[str, Any], key: str) -> str | None:
    value = event.get(key)
    return value if isinstance(value, str) else None


def _require_delta(event: dict[str, Any]) -> str:
    delta = event.get("delta")
    if not isinstance(delta, str):
        raise UpstreamProtocolError(f"{event['type']} carries a non-string delta")
    return delta


def _translate_error(event: dict[str, Any]) -> UpstreamError:
    error = event.get("error")
    if isinstance(error, str):
        return UpstreamError(code=None, message=error)
    if not isinstance(error, dict):
        raise UpstreamProtocolError("error event missing 'error' object")
    code = error.get("code") or error.get("type")
    message = error.get("message")
    return UpstreamError(
        code=str(code) if code is not None else None,
        message=message if isinstance(message, str) and message else "Upstream service error",
    )


def translate_upstream_event(event: dict[str, Any]) -> RelayEvent | None:
    """Map one upstream event to at most one relay event.

    Unknown tags return None so newer protocol revisions never break the relay.
    Raises UpstreamProtocolError when a known tag has the wrong shape.
    """
    event_type = event["type"]

    if event_type == EVT_SPEECH_STARTED:
        return SpeechStarted()
    if event_type == EVT_SPEECH_STOPPED:
        return SpeechStopped()
    if event_type == EVT_AUDIO_DELTA:
        return AudioDelta(
            audio=_require_delta(event),
            response_id=_optional_str(event, "response_id"),
            item_id=_optional_str(event, "item_id"),
        )
    if event_type == EVT_TEXT_DELTA:
        return TextDelta(
            text=_require_delta(event),
            response_id=_optional_str(event, "response_id"),
            item_id=_optional_str(event, "item_id"),
        )
    if event_type == EVT_RESPONSE_DONE:
        response = event.get("response") or {}
        if not isinstance(response, dict):
            raise UpstreamProtocolError("response.done carries a non-object response")
        return ResponseComplete(response=response)
    if event_type == EVT_ERROR:
        return _translate_error(event)

    logger.debug("ignoring upstream event type=%s", event_type)
    return None


__all__ = ["parse_upstream_event", "translate_upstream_event"]
