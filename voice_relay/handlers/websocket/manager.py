"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging
import contextlib
from functools import partial

from fastapi import WebSocket

from voice_relay.state import RuntimeDeps
from voice_relay.session.phase import SessionPhase
from voice_relay.session.connection import ConnectionSession
from voice_relay.handlers.limits import SlidingWindowRateLimiter
from voice_relay.config.websocket import (
    MSG_CONNECTED,
    WS_CLOSE_BUSY_CODE,
    WS_CONNECTED_MESSAGE,
    WS_SERVER_AT_CAPACITY,
)

from .lifecycle import WebSocketLifecycle
from .message_loop import run_message_loop
from .errors import safe_send_json, reject_connection, safe_send_envelope

logger = logging.getLogger(__name__)


def _create_rate_limiter(runtime_deps: RuntimeDeps) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(
        limit=runtime_deps.settings.limits.ws_max_messages_per_window,
        window_seconds=runtime_deps.settings.limits.ws_message_window_seconds,
    )


def _create_session(ws: WebSocket, runtime_deps: RuntimeDeps) -> ConnectionSession:
    return ConnectionSession(
        partial(safe_send_json, ws),
        upstream=runtime_deps.realtime_bridge.new_client(),
        peer_factory=runtime_deps.peer_factory,
        workflow=runtime_deps.workflow,
    )


async def _prepare_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> bool:
    if not await runtime_deps.connections.admit(ws):
        await reject_connection(ws, message=WS_SERVER_AT_CAPACITY, close_code=WS_CLOSE_BUSY_CODE)
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await runtime_deps.connections.release(ws)
        raise
    return True


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    lifecycle: WebSocketLifecycle | None = None
    session: ConnectionSession | None = None
    admitted = False
    try:
        if not await _prepare_connection(ws, runtime_deps):
            return
        admitted = True

        session = _create_session(ws, runtime_deps)
        runtime_deps.sessions[session.id] = session

        lifecycle = WebSocketLifecycle(
            ws,
            runtime_deps.settings.websocket,
            is_busy_fn=lambda: session.phase is SessionPhase.NEGOTIATING,
        )
        lifecycle.start()

        await safe_send_envelope(ws, MSG_CONNECTED, message=WS_CONNECTED_MESSAGE)
        logger.info(
            "WebSocket connection accepted session_id=%s. Active: %s",
            session.id,
            runtime_deps.connections.active_count(),
        )
        await run_message_loop(ws, lifecycle, _create_rate_limiter(runtime_deps), session)
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()

        if session is not None:
            runtime_deps.sessions.pop(session.id, None)
            await session.teardown()

        if admitted:
            with contextlib.suppress(Exception):
                await runtime_deps.connections.release(ws)
            logger.info(
                "WebSocket connection closed session_id=%s. Active: %s",
                session.id if session is not None else None,
                runtime_deps.connections.active_count(),
            )


__all__ = ["handle_websocket_connection"]
