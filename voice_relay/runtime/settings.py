"""Environment parsing for runtime settings.

Variable names and defaults live in `voice_relay/config/*`; this module reads
the environment once at startup and exposes structured dataclasses to the rest
of the server.
"""

from __future__ import annotations

import os
import logging

from voice_relay.config.secrets import ENV_OPENAI_API_KEY
from voice_relay.config.server import ENV_APP_ENVIRONMENT, DEFAULT_APP_ENVIRONMENT
from voice_relay.config.workflow import ENV_N8N_TIMEOUT_S, ENV_N8N_WEBHOOK_URL, DEFAULT_N8N_TIMEOUT_S
from voice_relay.config.webrtc import (
    ENV_STUN_SERVER,
    ENV_TURN_SERVER,
    ENV_TURN_PASSWORD,
    ENV_TURN_USERNAME,
    DEFAULT_STUN_SERVER,
)
from voice_relay.config.upstream import (
    ENV_OPENAI_REALTIME_URL,
    ENV_OPENAI_REALTIME_MODEL,
    ENV_UPSTREAM_OPEN_TIMEOUT_S,
    DEFAULT_OPENAI_REALTIME_URL,
    DEFAULT_OPENAI_REALTIME_MODEL,
    DEFAULT_UPSTREAM_OPEN_TIMEOUT_S,
)
from voice_relay.config.limits import (
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
)
from voice_relay.config.websocket import (
    ENV_WS_ENDPOINT_PATH,
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_ENDPOINT_PATH,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    ENV_WS_MAX_CONNECTION_DURATION_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)
from voice_relay.state.settings import (
    AppSettings,
    LimitsSettings,
    WebRTCSettings,
    UpstreamSettings,
    WorkflowSettings,
    IceServerSettings,
    WebSocketSettings,
)

logger = logging.getLogger(__name__)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid integer for %s: %s", name, raw)
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid float for %s: %s", name, raw)
        return default


def _load_limits_settings() -> LimitsSettings:
    return LimitsSettings(
        max_concurrent_connections=max(1, _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)),
        ws_message_window_seconds=_float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS),
        ws_max_messages_per_window=_int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW),
    )


def _load_websocket_settings() -> WebSocketSettings:
    path = _str_env(ENV_WS_ENDPOINT_PATH, DEFAULT_WS_ENDPOINT_PATH)
    if not path.startswith("/"):
        path = f"/{path}"
    return WebSocketSettings(
        endpoint_path=path,
        idle_timeout_s=_float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S),
        watchdog_tick_s=_float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S),
        max_connection_duration_s=_float_env(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S),
    )


def _load_upstream_settings() -> UpstreamSettings:
    timeout_s = _float_env(ENV_UPSTREAM_OPEN_TIMEOUT_S, DEFAULT_UPSTREAM_OPEN_TIMEOUT_S)
    if timeout_s <= 0:
        timeout_s = DEFAULT_UPSTREAM_OPEN_TIMEOUT_S
    return UpstreamSettings(
        api_key=(os.getenv(ENV_OPENAI_API_KEY) or "").strip(),
        url=_str_env(ENV_OPENAI_REALTIME_URL, DEFAULT_OPENAI_REALTIME_URL),
        model=_str_env(ENV_OPENAI_REALTIME_MODEL, DEFAULT_OPENAI_REALTIME_MODEL),
        open_timeout_s=timeout_s,
    )


def _load_webrtc_settings() -> WebRTCSettings:
    servers = [IceServerSettings(urls=_str_env(ENV_STUN_SERVER, DEFAULT_STUN_SERVER))]
    turn = (os.getenv(ENV_TURN_SERVER) or "").strip()
    if turn:
        servers.append(
            IceServerSettings(
                urls=turn,
                username=(os.getenv(ENV_TURN_USERNAME) or "").strip() or None,
                credential=(os.getenv(ENV_TURN_PASSWORD) or "").strip() or None,
            )
        )
    return WebRTCSettings(ice_servers=tuple(servers))


def _load_workflow_settings() -> WorkflowSettings:
    return WorkflowSettings(
        webhook_url=(os.getenv(ENV_N8N_WEBHOOK_URL) or "").strip(),
        timeout_s=_float_env(ENV_N8N_TIMEOUT_S, DEFAULT_N8N_TIMEOUT_S),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        environment=_str_env(ENV_APP_ENVIRONMENT, DEFAULT_APP_ENVIRONMENT),
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
        upstream=_load_upstream_settings(),
        webrtc=_load_webrtc_settings(),
        workflow=_load_workflow_settings(),
    )


__all__ = ["load_settings"]
