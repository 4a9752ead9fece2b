"""WebSocket receive loop for one client connection."""

from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect

from voice_relay.errors import MalformedClientMessage
from voice_relay.session.connection import ConnectionSession
from voice_relay.handlers.limits import SlidingWindowRateLimiter
from voice_relay.config.websocket import WS_KEY_TYPE, WS_KEY_PAYLOAD, WS_INVALID_MESSAGE_FORMAT

from .errors import send_error
from .parser import parse_client_message
from .lifecycle import WebSocketLifecycle
from .limits import consume_limiter, is_rate_limited_type

logger = logging.getLogger(__name__)


async def _recv_text_with_watchdog(ws: WebSocket, lifecycle: WebSocketLifecycle) -> tuple[str | None, bool]:
    try:
        message = await asyncio.wait_for(ws.receive_text(), timeout=lifecycle.watchdog_tick_s * 2)
        return message, False
    except TimeoutError:
        return None, lifecycle.should_close()


async def run_message_loop(
    ws: WebSocket,
    lifecycle: WebSocketLifecycle,
    limiter: SlidingWindowRateLimiter,
    session: ConnectionSession,
) -> None:
    try:
        while True:
            raw, should_exit = await _recv_text_with_watchdog(ws, lifecycle)
            if should_exit:
                return
            if raw is None:
                continue

            lifecycle.touch()

            try:
                msg = parse_client_message(raw)
            except MalformedClientMessage as exc:
                logger.info("session %s: rejected client frame: %s", session.id, exc)
                await send_error(ws, WS_INVALID_MESSAGE_FORMAT)
                continue

            msg_type = msg[WS_KEY_TYPE]
            if is_rate_limited_type(msg_type) and not await consume_limiter(ws, limiter):
                continue

            await session.dispatch(msg_type, msg[WS_KEY_PAYLOAD])
    except WebSocketDisconnect:
        return


__all__ = ["run_message_loop"]
