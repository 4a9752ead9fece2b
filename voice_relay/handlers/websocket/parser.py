"""Inbound client frame parsing."""

from __future__ import annotations

from typing import Any

import orjson

from voice_relay.errors import MalformedClientMessage
from voice_relay.config.websocket import WS_KEY_TYPE, WS_KEY_PAYLOAD


def parse_client_message(raw: str | bytes) -> dict[str, Any]:
    """Parse one text frame into `{"type": str, "payload": Any}`.

    The payload is passed through untouched; handlers validate its shape.
    """
    try:
        msg = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise MalformedClientMessage(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise MalformedClientMessage("message must be a JSON object")

    msg_type = msg.get(WS_KEY_TYPE)
    if not isinstance(msg_type, str) or not msg_type.strip():
        raise MalformedClientMessage("message missing non-empty 'type'")

    return {WS_KEY_TYPE: msg_type.strip(), WS_KEY_PAYLOAD: msg.get(WS_KEY_PAYLOAD)}


__all__ = ["parse_client_message"]
