"""HTTP server metadata."""

from __future__ import annotations

SERVER_VERSION = "1.0.0"

ENV_APP_ENVIRONMENT = "APP_ENV"
DEFAULT_APP_ENVIRONMENT = "development"

ENV_HOST = "HOST"
ENV_PORT = "PORT"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000

__all__ = [
    "SERVER_VERSION",
    "ENV_APP_ENVIRONMENT",
    "DEFAULT_APP_ENVIRONMENT",
    "ENV_HOST",
    "ENV_PORT",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
]
