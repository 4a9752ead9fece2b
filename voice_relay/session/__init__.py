from .phase import SessionPhase
from .connection import ConnectionSession

__all__ = ["ConnectionSession", "SessionPhase"]
