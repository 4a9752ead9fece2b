"""WebRTC signaling states tracked by the negotiation coordinator."""

from __future__ import annotations

from enum import Enum


class SignalingState(str, Enum):
    NONE = "none"
    HAVE_LOCAL_OFFER = "have-local-offer"
    HAVE_REMOTE_OFFER = "have-remote-offer"
    STABLE = "stable"


__all__ = ["SignalingState"]
