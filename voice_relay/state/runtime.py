"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from voice_relay.state.settings import AppSettings
    from voice_relay.workflow import WorkflowWebhook
    from voice_relay.realtime.bridge import RealtimeBridge
    from voice_relay.webrtc.coordinator import PeerFactory
    from voice_relay.handlers.connections import ConnectionManager


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    realtime_bridge: RealtimeBridge
    peer_factory: PeerFactory
    workflow: WorkflowWebhook
    settings: AppSettings
    sessions: dict[str, Any]

    async def shutdown(self) -> None:
        sessions = list(self.sessions.values())
        self.sessions.clear()
        for session in sessions:
            try:
                await session.teardown()
            except Exception:
                logger.exception("runtime shutdown: session teardown failed")


__all__ = ["RuntimeDeps"]
