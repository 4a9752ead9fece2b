"""Rate limiting for the WebSocket message loop."""

from __future__ import annotations

import math

from fastapi import WebSocket

from voice_relay.errors import RateLimitError
from voice_relay.config.websocket import MSG_ERROR
from voice_relay.config.limits import RATE_LIMIT_EXEMPT_TYPES
from voice_relay.handlers.limits import SlidingWindowRateLimiter

from .errors import safe_send_json, build_envelope


def is_rate_limited_type(msg_type: str) -> bool:
    return msg_type not in RATE_LIMIT_EXEMPT_TYPES


async def consume_limiter(ws: WebSocket, limiter: SlidingWindowRateLimiter) -> bool:
    """Consume one slot; on rejection reply with an error and return False."""
    try:
        limiter.consume()
    except RateLimitError as exc:
        retry_in_s = max(1, math.ceil(exc.retry_in))
        message = (
            f"rate limit: at most {exc.limit} messages per {int(exc.window_seconds)} seconds; "
            f"retry in {retry_in_s} seconds"
        )
        await safe_send_json(
            ws,
            build_envelope(
                MSG_ERROR,
                message=message,
                payload={
                    "code": "rate_limited",
                    "message": message,
                    "retry_in": retry_in_s,
                    "limit": exc.limit,
                    "window_seconds": int(exc.window_seconds),
                },
            ),
        )
        return False
    return True


__all__ = ["consume_limiter", "is_rate_limited_type"]
