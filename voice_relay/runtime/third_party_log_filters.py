"""Log noise filters for third-party libraries.

aioice and aiortc log every connectivity check at INFO; keep them at WARNING
unless explicitly enabled.
"""

from __future__ import annotations

import os
import logging

from voice_relay.config.logging import ENV_SHOW_WEBRTC_LOGS

_NOISY_LOGGERS = ("aioice", "aiortc", "websockets.client")


def configure() -> None:
    if (os.getenv(ENV_SHOW_WEBRTC_LOGS) or "").strip().lower() in {"1", "true", "yes"}:
        return
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure"]
