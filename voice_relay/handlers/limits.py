"""Sliding-window rate limiting for inbound client messages."""

from __future__ import annotations

import time
import collections
from collections.abc import Callable

from voice_relay.errors import RateLimitError

TimeFn = Callable[[], float]


class SlidingWindowRateLimiter:
    """Allow at most `limit` events in any trailing `window_seconds`.

    A non-positive limit or window disables the limiter.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        now_fn: TimeFn | None = None,
    ) -> None:
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))
        self._now = now_fn or time.monotonic
        self._stamps: collections.deque[float] = collections.deque()

    @property
    def enabled(self) -> bool:
        return self.limit > 0 and self.window_seconds > 0

    def consume(self) -> None:
        if not self.enabled:
            return

        now = self._now()
        stamps = self._stamps
        while stamps and stamps[0] <= now - self.window_seconds:
            stamps.popleft()

        if len(stamps) >= self.limit:
            raise RateLimitError(
                retry_in=max(0.0, stamps[0] + self.window_seconds - now),
                limit=self.limit,
                window_seconds=self.window_seconds,
            )
        stamps.append(now)


__all__ = ["SlidingWindowRateLimiter"]
