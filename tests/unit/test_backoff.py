from __future__ import annotations

import pytest

from voice_relay.client.backoff import connect_with_retry, reconnect_delay_s


def test_reconnect_delay_doubles_per_attempt() -> None:
    assert [reconnect_delay_s(n, 1.0, 5) for n in range(1, 6)] == [1.0, 2.0, 4.0, 8.0, 16.0]


def test_reconnect_delay_exhausted_beyond_max_attempts() -> None:
    assert reconnect_delay_s(6, 1.0, 5) is None
    assert reconnect_delay_s(0, 1.0, 5) is None


@pytest.mark.asyncio
async def test_connect_with_retry_recovers_after_failures() -> None:
    sleeps: list[float] = []
    attempts = 0

    async def sleep(delay: float) -> None:
        sleeps.append(delay)

    async def open_fn() -> str:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise ConnectionRefusedError("refused")
        return "ws"

    assert await connect_with_retry(open_fn, base_delay_s=0.5, max_attempts=5, sleep=sleep) == "ws"
    assert sleeps == [0.5, 1.0]


@pytest.mark.asyncio
async def test_connect_with_retry_gives_up_after_max_attempts() -> None:
    sleeps: list[float] = []

    async def sleep(delay: float) -> None:
        sleeps.append(delay)

    async def open_fn() -> str:
        raise ConnectionRefusedError("refused")

    with pytest.raises(ConnectionRefusedError):
        await connect_with_retry(open_fn, base_delay_s=1.0, max_attempts=3, sleep=sleep)
    assert sleeps == [1.0, 2.0, 4.0]
