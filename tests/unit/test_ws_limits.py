from __future__ import annotations

import json

import pytest

from voice_relay.handlers.limits import SlidingWindowRateLimiter
from voice_relay.handlers.websocket.limits import consume_limiter, is_rate_limited_type


class _FakeWebSocket:
    def __init__(self) -> None:
        self.sent: list[dict] = []

    async def send_text(self, text: str) -> None:
        self.sent.append(json.loads(text))


def test_control_messages_are_exempt() -> None:
    assert not is_rate_limited_type("ping")
    assert not is_rate_limited_type("end_session")
    assert is_rate_limited_type("audio_data")


@pytest.mark.asyncio
async def test_consume_limiter_replies_with_error_when_saturated() -> None:
    ws = _FakeWebSocket()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, now_fn=lambda: 0.0)

    assert await consume_limiter(ws, limiter) is True
    assert await consume_limiter(ws, limiter) is False

    error = ws.sent[0]
    assert error["type"] == "error"
    assert error["payload"]["code"] == "rate_limited"
    assert error["payload"]["retry_in"] == 60
    assert error["payload"]["limit"] == 1
