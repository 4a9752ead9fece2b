from __future__ import annotations

from enum import Enum


class SessionPhase(str, Enum):
    IDLE = "idle"
    NEGOTIATING = "negotiating"
    ACTIVE = "active"
    ENDED = "ended"


__all__ = ["SessionPhase"]
