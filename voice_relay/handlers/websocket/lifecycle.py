"""Per-connection watchdog enforcing idle and maximum-duration limits."""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

from voice_relay.state.settings import WebSocketSettings
from voice_relay.config.websocket import (
    WS_CLOSE_IDLE_CODE,
    WS_CLOSE_IDLE_REASON,
    WS_CLOSE_MAX_DURATION_CODE,
    WS_CLOSE_MAX_DURATION_REASON,
)

logger = logging.getLogger(__name__)


class WebSocketLifecycle:
    def __init__(
        self,
        websocket: Any,
        settings: WebSocketSettings,
        *,
        is_busy_fn: Callable[[], bool] | None = None,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self._ws = websocket
        self._is_busy_fn = is_busy_fn or (lambda: False)
        self._now = now_fn or time.monotonic
        self._idle_timeout_s = float(settings.idle_timeout_s)
        self._watchdog_tick_s = float(settings.watchdog_tick_s)
        self._max_duration_s = float(settings.max_connection_duration_s)
        self._opened_at = self._now()
        self._last_activity = self._opened_at
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def watchdog_tick_s(self) -> float:
        return self._watchdog_tick_s

    def touch(self) -> None:
        self._last_activity = self._now()

    def should_close(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self._watchdog_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(Exception):
            await self._task
        self._task = None

    def expired_reason(self) -> tuple[int, str] | None:
        """Return the close code and reason once a limit has been crossed."""
        now = self._now()
        if self._max_duration_s > 0 and now - self._opened_at >= self._max_duration_s:
            return WS_CLOSE_MAX_DURATION_CODE, WS_CLOSE_MAX_DURATION_REASON
        if self._is_busy_fn():
            return None
        if self._idle_timeout_s > 0 and now - self._last_activity >= self._idle_timeout_s:
            return WS_CLOSE_IDLE_CODE, WS_CLOSE_IDLE_REASON
        return None

    async def _watchdog_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._watchdog_tick_s)
                if self._stop_event.is_set():
                    break
                expired = self.expired_reason()
                if expired is None:
                    continue
                code, reason = expired
                logger.info("closing WebSocket: %s", reason)
                self._stop_event.set()
                with contextlib.suppress(Exception):
                    await self._ws.close(code=code, reason=reason)
                break
        except asyncio.CancelledError:
            return
        except Exception:
            logger.debug("watchdog exiting due to unexpected error", exc_info=True)


__all__ = ["WebSocketLifecycle"]
