"""Builders for outbound upstream control messages."""

from __future__ import annotations

from typing import Any

from voice_relay.config.upstream import (
    SESSION_VOICE,
    EVT_AUDIO_COMMIT,
    EVT_AUDIO_APPEND,
    SESSION_MODALITIES,
    SESSION_TOOL_CHOICE,
    SESSION_TEMPERATURE,
    EVT_RESPONSE_CANCEL,
    EVT_RESPONSE_CREATE,
    EVT_SESSION_UPDATE,
    SESSION_INSTRUCTIONS,
    SESSION_VAD_THRESHOLD,
    SESSION_INPUT_AUDIO_FORMAT,
    SESSION_OUTPUT_AUDIO_FORMAT,
    SESSION_TRANSCRIPTION_MODEL,
    SESSION_TURN_DETECTION_TYPE,
    RESPONSE_CREATE_INSTRUCTIONS,
    SESSION_VAD_PREFIX_PADDING_MS,
    SESSION_VAD_SILENCE_DURATION_MS,
    SESSION_MAX_RESPONSE_OUTPUT_TOKENS,
)


def build_session_update() -> dict[str, Any]:
    return {
        "type": EVT_SESSION_UPDATE,
        "session": {
            "modalities": list(SESSION_MODALITIES),
            "instructions": SESSION_INSTRUCTIONS,
            "voice": SESSION_VOICE,
            "input_audio_format": SESSION_INPUT_AUDIO_FORMAT,
            "output_audio_format": SESSION_OUTPUT_AUDIO_FORMAT,
            "input_audio_transcription": {"model": SESSION_TRANSCRIPTION_MODEL},
            "turn_detection": {
                "type": SESSION_TURN_DETECTION_TYPE,
                "threshold": SESSION_VAD_THRESHOLD,
                "prefix_padding_ms": SESSION_VAD_PREFIX_PADDING_MS,
                "silence_duration_ms": SESSION_VAD_SILENCE_DURATION_MS,
            },
            "tools": [],
            "tool_choice": SESSION_TOOL_CHOICE,
            "temperature": SESSION_TEMPERATURE,
            "max_response_output_tokens": SESSION_MAX_RESPONSE_OUTPUT_TOKENS,
        },
    }


def build_audio_append(audio_b64: str) -> dict[str, Any]:
    return {"type": EVT_AUDIO_APPEND, "audio": audio_b64}


def build_audio_commit() -> dict[str, Any]:
    return {"type": EVT_AUDIO_COMMIT}


def build_response_create() -> dict[str, Any]:
    return {
        "type": EVT_RESPONSE_CREATE,
        "response": {
            "modalities": list(SESSION_MODALITIES),
            "instructions": RESPONSE_CREATE_INSTRUCTIONS,
        },
    }


def build_response_cancel(response_id: str | None) -> dict[str, Any]:
    msg: dict[str, Any] = {"type": EVT_RESPONSE_CANCEL}
    if response_id:
        msg["response_id"] = response_id
    return msg


__all__ = [
    "build_audio_append",
    "build_audio_commit",
    "build_response_cancel",
    "build_response_create",
    "build_session_update",
]
