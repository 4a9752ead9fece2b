"""WebRTC ICE server configuration."""

from __future__ import annotations

ENV_STUN_SERVER = "STUN_SERVER"
ENV_TURN_SERVER = "TURN_SERVER"
ENV_TURN_USERNAME = "TURN_USERNAME"
ENV_TURN_PASSWORD = "TURN_PASSWORD"

DEFAULT_STUN_SERVER = "stun:stun.l.google.com:19302"

__all__ = [
    "ENV_STUN_SERVER",
    "ENV_TURN_SERVER",
    "ENV_TURN_USERNAME",
    "ENV_TURN_PASSWORD",
    "DEFAULT_STUN_SERVER",
]
