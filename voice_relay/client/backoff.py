"""Reconnect-with-backoff policy for relay clients."""

from __future__ import annotations

import asyncio
import logging
from typing import TypeVar
from collections.abc import Callable, Awaitable

from websockets.exceptions import InvalidHandshake

from voice_relay.config.client import DEFAULT_RECONNECT_MAX_ATTEMPTS, DEFAULT_RECONNECT_BASE_DELAY_S

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (OSError, TimeoutError, InvalidHandshake)


def reconnect_delay_s(
    attempt: int,
    base_delay_s: float = DEFAULT_RECONNECT_BASE_DELAY_S,
    max_attempts: int = DEFAULT_RECONNECT_MAX_ATTEMPTS,
) -> float | None:
    """Delay before reconnect `attempt` (1-based), or None once attempts are exhausted."""
    if attempt < 1 or attempt > max_attempts:
        return None
    return base_delay_s * (2 ** (attempt - 1))


async def connect_with_retry(
    open_fn: Callable[[], Awaitable[T]],
    *,
    base_delay_s: float = DEFAULT_RECONNECT_BASE_DELAY_S,
    max_attempts: int = DEFAULT_RECONNECT_MAX_ATTEMPTS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    attempt = 0
    while True:
        try:
            return await open_fn()
        except RETRYABLE_ERRORS as exc:
            attempt += 1
            delay = reconnect_delay_s(attempt, base_delay_s, max_attempts)
            if delay is None:
                logger.error("giving up after %d reconnect attempts: %s", max_attempts, exc)
                raise
            logger.warning("connect failed (%s); retry %d/%d in %.1fs", exc, attempt, max_attempts, delay)
            await sleep(delay)


__all__ = ["connect_with_retry", "reconnect_delay_s"]
