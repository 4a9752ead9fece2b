"""Smoke client defaults."""

from __future__ import annotations

# Reconnect policy: delay = base * 2^(attempt - 1), attempts 1..max.
DEFAULT_RECONNECT_BASE_DELAY_S = 1.0
DEFAULT_RECONNECT_MAX_ATTEMPTS = 5

CLIENT_REPLY_TIMEOUT_S = 15.0
CLIENT_HTTP_TIMEOUT_S = 5.0
CLIENT_MAX_MESSAGE_BYTES = 16 * 1024 * 1024

# Upstream input format is pcm16 mono at 24 kHz.
CLIENT_AUDIO_SAMPLE_RATE_HZ = 24000
CLIENT_AUDIO_CHUNK_MS = 20

__all__ = [
    "DEFAULT_RECONNECT_BASE_DELAY_S",
    "DEFAULT_RECONNECT_MAX_ATTEMPTS",
    "CLIENT_REPLY_TIMEOUT_S",
    "CLIENT_HTTP_TIMEOUT_S",
    "CLIENT_MAX_MESSAGE_BYTES",
    "CLIENT_AUDIO_SAMPLE_RATE_HZ",
    "CLIENT_AUDIO_CHUNK_MS",
]
