from __future__ import annotations

import asyncio

import pytest

from voice_relay.state.settings import WebSocketSettings
from voice_relay.handlers.websocket.lifecycle import WebSocketLifecycle
from voice_relay.config.websocket import (
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
    WS_CLOSE_MAX_DURATION_CODE,
    WS_CLOSE_MAX_DURATION_REASON,
)


class _FakeWebSocket:
    def __init__(self) -> None:
        self.closed = asyncio.Event()
        self.close_code: int | None = None
        self.close_reason: str | None = None

    async def close(self, *, code: int = 1000, reason: str | None = None) -> None:
        self.close_code = code
        self.close_reason = reason or ""
        self.closed.set()


def _settings(*, idle: float, tick: float, max_duration: float) -> WebSocketSettings:
    return WebSocketSettings(
        endpoint_path="/",
        idle_timeout_s=idle,
        watchdog_tick_s=tick,
        max_connection_duration_s=max_duration,
    )


@pytest.mark.asyncio
async def test_websocket_lifecycle_closes_on_max_duration() -> None:
    ws = _FakeWebSocket()
    lifecycle = WebSocketLifecycle(ws, _settings(idle=9999.0, tick=0.01, max_duration=0.05))
    lifecycle.start()

    await asyncio.wait_for(ws.closed.wait(), timeout=1.0)
    assert ws.close_code == WS_CLOSE_MAX_DURATION_CODE
    assert ws.close_reason == WS_CLOSE_MAX_DURATION_REASON
    assert lifecycle.should_close()

    await lifecycle.stop()


@pytest.mark.asyncio
async def test_websocket_lifecycle_closes_when_idle() -> None:
    ws = _FakeWebSocket()
    lifecycle = WebSocketLifecycle(ws, _settings(idle=0.05, tick=0.01, max_duration=0.0))
    lifecycle.start()

    await asyncio.wait_for(ws.closed.wait(), timeout=1.0)
    assert ws.close_code == WS_CLOSE_IDLE_CODE
    assert ws.close_reason == WS_CLOSE_IDLE_REASON

    await lifecycle.stop()


def test_websocket_lifecycle_touch_resets_idle_clock() -> None:
    t = 0.0

    def now() -> float:
        return t

    lifecycle = WebSocketLifecycle(_FakeWebSocket(), _settings(idle=10.0, tick=1.0, max_duration=0.0), now_fn=now)
    t = 9.0
    lifecycle.touch()
    t = 15.0
    assert lifecycle.expired_reason() is None
    t = 19.0
    assert lifecycle.expired_reason() == (WS_CLOSE_IDLE_CODE, WS_CLOSE_IDLE_REASON)


def test_websocket_lifecycle_busy_connection_is_not_idle() -> None:
    t = 0.0

    def now() -> float:
        return t

    lifecycle = WebSocketLifecycle(
        _FakeWebSocket(),
        _settings(idle=1.0, tick=1.0, max_duration=100.0),
        is_busy_fn=lambda: True,
        now_fn=now,
    )
    t = 50.0
    assert lifecycle.expired_reason() is None
    t = 100.0
    assert lifecycle.expired_reason() == (WS_CLOSE_MAX_DURATION_CODE, WS_CLOSE_MAX_DURATION_REASON)
