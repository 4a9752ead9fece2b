"""Configuration module exports (env variable names and defaults only)."""

from .websocket import DEFAULT_WS_ENDPOINT_PATH
from .limits import DEFAULT_MAX_CONCURRENT_CONNECTIONS

__all__ = [
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "DEFAULT_WS_ENDPOINT_PATH",
]
