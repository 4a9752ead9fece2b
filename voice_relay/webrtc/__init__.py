"""WebRTC signaling for browser voice clients."""

from .state import SignalingState
from .peer import PeerConnectionFactory
from .coordinator import PeerNegotiationCoordinator

__all__ = ["PeerConnectionFactory", "PeerNegotiationCoordinator", "SignalingState"]
