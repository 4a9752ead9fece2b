"""Shared error types for the voice relay server."""

from __future__ import annotations

from dataclasses import dataclass


class RelayError(Exception):
    """Base class for failures scoped to a single client connection."""


class UpstreamUnavailable(RelayError):
    """Raised when the realtime AI service cannot be opened or authenticated."""


class UpstreamProtocolError(RelayError):
    """Raised when an upstream event is malformed or has an unexpected shape."""


class NegotiationError(RelayError):
    """Raised when a WebRTC signaling message violates the signaling state machine."""


class MalformedClientMessage(RelayError, ValueError):
    """Raised when an inbound client frame cannot be parsed into an envelope."""


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


__all__ = [
    "MalformedClientMessage",
    "NegotiationError",
    "RateLimitError",
    "RelayError",
    "UpstreamProtocolError",
    "UpstreamUnavailable",
]
