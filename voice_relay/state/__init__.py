from .runtime import RuntimeDeps
from .settings import AppSettings

__all__ = ["AppSettings", "RuntimeDeps"]
