"""WebSocket protocol configuration and constants."""

from __future__ import annotations

# Client-facing envelope keys
WS_KEY_TYPE = "type"
WS_KEY_PAYLOAD = "payload"
WS_KEY_MESSAGE = "message"

# The browser client connects to the page origin itself.
ENV_WS_ENDPOINT_PATH = "WS_ENDPOINT_PATH"
DEFAULT_WS_ENDPOINT_PATH = "/"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_MAX_DURATION_CODE = 4003

WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"

# Idle watchdog. The browser pings every 30s, so the default idle window covers
# several missed heartbeats.
ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
ENV_WS_MAX_CONNECTION_DURATION_S = "WS_MAX_CONNECTION_DURATION_S"

DEFAULT_WS_IDLE_TIMEOUT_S = 150.0
DEFAULT_WS_WATCHDOG_TICK_S = 5.0
DEFAULT_WS_MAX_CONNECTION_DURATION_S = 3600.0

# Inbound message types
MSG_START_SESSION = "start_session"
MSG_END_SESSION = "end_session"
MSG_AUDIO_DATA = "audio_data"
MSG_WEBRTC_OFFER = "webrtc_offer"
MSG_WEBRTC_ANSWER = "webrtc_answer"
MSG_WEBRTC_ICE_CANDIDATE = "webrtc_ice_candidate"
MSG_WEBRTC_REQUEST_OFFER = "webrtc_request_offer"
MSG_TRIGGER_N8N = "trigger_n8n"
MSG_COMMIT_AUDIO = "commit_audio"
MSG_CREATE_RESPONSE = "create_response"
MSG_CANCEL_RESPONSE = "cancel_response"
MSG_PING = "ping"

# Outbound message types
MSG_CONNECTED = "connected"
MSG_SESSION_STARTED = "session_started"
MSG_SESSION_ENDED = "session_ended"
MSG_AUDIO_RESPONSE = "audio_response"
MSG_TEXT_RESPONSE = "text_response"
MSG_SPEECH_STARTED = "speech_started"
MSG_SPEECH_STOPPED = "speech_stopped"
MSG_RESPONSE_COMPLETE = "response_complete"
MSG_ERROR = "error"
MSG_N8N_RESPONSE = "n8n_response"
MSG_CONNECTION_STATE = "connection_state"
MSG_AUDIO_STREAM_RECEIVED = "audio_stream_received"
MSG_PONG = "pong"

# Human-readable replies
WS_CONNECTED_MESSAGE = "Voice agent ready"
WS_SESSION_STARTED_MESSAGE = "OpenAI Realtime session started"
WS_SESSION_ENDED_MESSAGE = "Session ended successfully"
WS_INVALID_MESSAGE_FORMAT = "Invalid message format"
WS_SERVER_AT_CAPACITY = "Server cannot accept new connections. Please try again later."

__all__ = [
    "WS_KEY_TYPE",
    "WS_KEY_PAYLOAD",
    "WS_KEY_MESSAGE",
    "ENV_WS_ENDPOINT_PATH",
    "DEFAULT_WS_ENDPOINT_PATH",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_MAX_DURATION_REASON",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_WATCHDOG_TICK_S",
    "ENV_WS_MAX_CONNECTION_DURATION_S",
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "DEFAULT_WS_MAX_CONNECTION_DURATION_S",
    "MSG_START_SESSION",
    "MSG_END_SESSION",
    "MSG_AUDIO_DATA",
    "MSG_WEBRTC_OFFER",
    "MSG_WEBRTC_ANSWER",
    "MSG_WEBRTC_ICE_CANDIDATE",
    "MSG_WEBRTC_REQUEST_OFFER",
    "MSG_TRIGGER_N8N",
    "MSG_COMMIT_AUDIO",
    "MSG_CREATE_RESPONSE",
    "MSG_CANCEL_RESPONSE",
    "MSG_PING",
    "MSG_CONNECTED",
    "MSG_SESSION_STARTED",
    "MSG_SESSION_ENDED",
    "MSG_AUDIO_RESPONSE",
    "MSG_TEXT_RESPONSE",
    "MSG_SPEECH_STARTED",
    "MSG_SPEECH_STOPPED",
    "MSG_RESPONSE_COMPLETE",
    "MSG_ERROR",
    "MSG_N8N_RESPONSE",
    "MSG_CONNECTION_STATE",
    "MSG_AUDIO_STREAM_RECEIVED",
    "MSG_PONG",
    "WS_CONNECTED_MESSAGE",
    "WS_SESSION_STARTED_MESSAGE",
    "WS_SESSION_ENDED_MESSAGE",
    "WS_INVALID_MESSAGE_FORMAT",
    "WS_SERVER_AT_CAPACITY",
]
