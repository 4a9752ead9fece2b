"""Runtime dependency construction (upstream bridge, WebRTC, webhook, admission)."""

from __future__ import annotations

import logging

from voice_relay.state import RuntimeDeps
from voice_relay.state.settings import AppSettings
from voice_relay.realtime.bridge import RealtimeBridge
from voice_relay.workflow import WorkflowWebhook
from voice_relay.webrtc.peer import PeerConnectionFactory
from voice_relay.handlers.connections import ConnectionManager

from .settings import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    realtime_bridge = RealtimeBridge(settings=settings.upstream)
    if not realtime_bridge.configured:
        logger.warning("OPENAI_API_KEY is not set; start_session will fail until it is configured")

    workflow = WorkflowWebhook(settings.workflow)
    if not workflow.configured:
        logger.info("N8N_WEBHOOK_URL is not set; workflow triggers are disabled")

    return RuntimeDeps(
        connections=ConnectionManager(max_connections=settings.limits.max_concurrent_connections),
        realtime_bridge=realtime_bridge,
        peer_factory=PeerConnectionFactory(settings.webrtc),
        workflow=workflow,
        settings=settings,
        sessions={},
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
