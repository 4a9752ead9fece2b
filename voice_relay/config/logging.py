"""Logging configuration constants."""

from __future__ import annotations

ENV_LOG_LEVEL = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Set to 1/true/yes to keep aiortc/aioice debug chatter.
ENV_SHOW_WEBRTC_LOGS = "SHOW_WEBRTC_LOGS"

__all__ = ["ENV_LOG_LEVEL", "DEFAULT_LOG_LEVEL", "LOG_FORMAT", "ENV_SHOW_WEBRTC_LOGS"]
