"""Send helpers for the client-facing JSON envelope."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from voice_relay.config.websocket import MSG_ERROR, WS_KEY_TYPE, WS_KEY_MESSAGE, WS_KEY_PAYLOAD

logger = logging.getLogger(__name__)


def build_envelope(
    msg_type: str,
    *,
    payload: Any | None = None,
    message: str | None = None,
) -> dict[str, Any]:
    envelope: dict[str, Any] = {WS_KEY_TYPE: msg_type}
    if message is not None:
        envelope[WS_KEY_MESSAGE] = message
    if payload is not None:
        envelope[WS_KEY_PAYLOAD] = payload
    return envelope


def build_error(message: str, *, code: str | None = None) -> dict[str, Any]:
    payload = {"code": code, "message": message} if code else None
    return build_envelope(MSG_ERROR, payload=payload, message=message)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_json(ws: WebSocket, data: dict[str, Any]) -> bool:
    return await safe_send_text(ws, orjson.dumps(data).decode("utf-8"))


async def safe_send_envelope(
    ws: WebSocket,
    msg_type: str,
    *,
    payload: Any | None = None,
    message: str | None = None,
) -> bool:
    return await safe_send_json(ws, build_envelope(msg_type, payload=payload, message=message))


async def send_error(ws: WebSocket, message: str, *, code: str | None = None) -> bool:
    return await safe_send_json(ws, build_error(message, code=code))


async def reject_connection(ws: WebSocket, *, message: str, close_code: int) -> None:
    # Accept so the client sees a structured error before the close frame.
    try:
        await ws.accept()
    except Exception:
        return
    await send_error(ws, message, code="server_at_capacity")
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = [
    "build_envelope",
    "build_error",
    "reject_connection",
    "safe_send_envelope",
    "safe_send_json",
    "safe_send_text",
    "send_error",
]
