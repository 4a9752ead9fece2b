"""Runtime package.

Keep this module dependency-light: importing `voice_relay.runtime.*` in unit
tests should not open sockets or touch the network.
"""

__all__: list[str] = []
