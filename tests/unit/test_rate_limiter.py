from __future__ import annotations

import pytest

from voice_relay.errors import RateLimitError
from voice_relay.handlers.limits import SlidingWindowRateLimiter


def test_rate_limiter_allows_within_limit() -> None:
    t = 0.0

    def now() -> float:
        return t

    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10, now_fn=now)
    limiter.consume()
    limiter.consume()


def test_rate_limiter_rejects_when_saturated() -> None:
    t = 0.0

    def now() -> float:
        return t

    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10, now_fn=now)
    limiter.consume()
    limiter.consume()

    with pytest.raises(RateLimitError) as exc:
        limiter.consume()
    assert exc.value.limit == 2
    assert exc.value.window_seconds == 10
    assert exc.value.retry_in == pytest.approx(10.0)


def test_rate_limiter_frees_slots_after_window() -> None:
    t = 0.0

    def now() -> float:
        return t

    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=5, now_fn=now)
    limiter.consume()
    t = 5.0
    limiter.consume()


def test_rate_limiter_disabled_with_zero_limit() -> None:
    limiter = SlidingWindowRateLimiter(limit=0, window_seconds=10)
    assert limiter.enabled is False
    for _ in range(100):
        limiter.consume()
