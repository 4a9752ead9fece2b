"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    endpoint_path: str
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    api_key: str
    url: str
    model: str
    open_timeout_s: float


@dataclass(frozen=True, slots=True)
class IceServerSettings:
    urls: str
    username: str | None = None
    credential: str | None = None


@dataclass(frozen=True, slots=True)
class WebRTCSettings:
    ice_servers: tuple[IceServerSettings, ...]


@dataclass(frozen=True, slots=True)
class WorkflowSettings:
    webhook_url: str
    timeout_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    environment: str
    limits: LimitsSettings
    websocket: WebSocketSettings
    upstream: UpstreamSettings
    webrtc: WebRTCSettings
    workflow: WorkflowSettings


__all__ = [
    "AppSettings",
    "IceServerSettings",
    "LimitsSettings",
    "UpstreamSettings",
    "WebRTCSettings",
    "WebSocketSettings",
    "WorkflowSettings",
]
