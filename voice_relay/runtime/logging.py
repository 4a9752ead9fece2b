"""Logging configuration."""

from __future__ import annotations

import os
import logging

from voice_relay.config.logging import LOG_FORMAT, ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL

from .third_party_log_filters import configure as configure_third_party_logs


def configure_logging() -> None:
    level = (os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    configure_third_party_logs()


__all__ = ["configure_logging"]
