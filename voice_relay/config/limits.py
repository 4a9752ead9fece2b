"""Admission control and rate limit configuration."""

from __future__ import annotations

ENV_MAX_CONCURRENT_CONNECTIONS = "MAX_CONCURRENT_CONNECTIONS"
ENV_WS_MESSAGE_WINDOW_SECONDS = "WS_MESSAGE_WINDOW_SECONDS"
ENV_WS_MAX_MESSAGES_PER_WINDOW = "WS_MAX_MESSAGES_PER_WINDOW"

DEFAULT_MAX_CONCURRENT_CONNECTIONS = 100
DEFAULT_WS_MESSAGE_WINDOW_SECONDS = 60.0

# Audio frames dominate inbound traffic. A browser worklet posting 20ms chunks
# sends ~3000 audio_data messages/minute; leave headroom for signaling.
DEFAULT_WS_MAX_MESSAGES_PER_WINDOW = 6000

# Control traffic that never counts against the message budget.
RATE_LIMIT_EXEMPT_TYPES = frozenset({"ping", "end_session"})

__all__ = [
    "ENV_MAX_CONCURRENT_CONNECTIONS",
    "ENV_WS_MESSAGE_WINDOW_SECONDS",
    "ENV_WS_MAX_MESSAGES_PER_WINDOW",
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_WS_MESSAGE_WINDOW_SECONDS",
    "DEFAULT_WS_MAX_MESSAGES_PER_WINDOW",
    "RATE_LIMIT_EXEMPT_TYPES",
]
