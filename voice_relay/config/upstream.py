"""Upstream realtime AI service configuration and fixed session parameters."""

from __future__ import annotations

ENV_OPENAI_REALTIME_URL = "OPENAI_REALTIME_URL"
ENV_OPENAI_REALTIME_MODEL = "OPENAI_REALTIME_MODEL"
ENV_UPSTREAM_OPEN_TIMEOUT_S = "UPSTREAM_OPEN_TIMEOUT_S"

DEFAULT_OPENAI_REALTIME_URL = "wss://api.openai.com/v1/realtime"
DEFAULT_OPENAI_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-10-01"

# Single bound on the open handshake: open-or-fail, no retries inside the call.
DEFAULT_UPSTREAM_OPEN_TIMEOUT_S = 10.0

# Audio deltas are base64 PCM16 and can be large.
UPSTREAM_MAX_MESSAGE_BYTES = 16 * 1024 * 1024

UPSTREAM_BETA_HEADER = ("OpenAI-Beta", "realtime=v1")

# Session configuration (constant for this system)
SESSION_MODALITIES: tuple[str, ...] = ("text", "audio")
SESSION_VOICE = "alloy"
SESSION_INPUT_AUDIO_FORMAT = "pcm16"
SESSION_OUTPUT_AUDIO_FORMAT = "pcm16"
SESSION_TRANSCRIPTION_MODEL = "whisper-1"
SESSION_TURN_DETECTION_TYPE = "server_vad"
SESSION_VAD_THRESHOLD = 0.5
SESSION_VAD_PREFIX_PADDING_MS = 300
SESSION_VAD_SILENCE_DURATION_MS = 500
SESSION_TEMPERATURE = 0.8
SESSION_MAX_RESPONSE_OUTPUT_TOKENS = 4096
SESSION_TOOL_CHOICE = "auto"

SESSION_INSTRUCTIONS = (
    "You are a helpful AI voice assistant. You should:\n"
    "- Respond naturally and conversationally\n"
    "- Keep responses concise but informative\n"
    "- Be friendly and professional\n"
    "- Handle interruptions gracefully\n"
    "- Adapt to the user's language and tone"
)

RESPONSE_CREATE_INSTRUCTIONS = "Please respond to the user naturally and conversationally."

# Upstream event tags
EVT_SESSION_UPDATE = "session.update"
EVT_AUDIO_APPEND = "input_audio_buffer.append"
EVT_AUDIO_COMMIT = "input_audio_buffer.commit"
EVT_RESPONSE_CREATE = "response.create"
EVT_RESPONSE_CANCEL = "response.cancel"

EVT_SPEECH_STARTED = "input_audio_buffer.speech_started"
EVT_SPEECH_STOPPED = "input_audio_buffer.speech_stopped"
EVT_AUDIO_DELTA = "response.audio.delta"
EVT_TEXT_DELTA = "response.text.delta"
EVT_RESPONSE_DONE = "response.done"
EVT_ERROR = "error"

__all__ = [
    "ENV_OPENAI_REALTIME_URL",
    "ENV_OPENAI_REALTIME_MODEL",
    "ENV_UPSTREAM_OPEN_TIMEOUT_S",
    "DEFAULT_OPENAI_REALTIME_URL",
    "DEFAULT_OPENAI_REALTIME_MODEL",
    "DEFAULT_UPSTREAM_OPEN_TIMEOUT_S",
    "UPSTREAM_MAX_MESSAGE_BYTES",
    "UPSTREAM_BETA_HEADER",
    "SESSION_MODALITIES",
    "SESSION_VOICE",
    "SESSION_INPUT_AUDIO_FORMAT",
    "SESSION_OUTPUT_AUDIO_FORMAT",
    "SESSION_TRANSCRIPTION_MODEL",
    "SESSION_TURN_DETECTION_TYPE",
    "SESSION_VAD_THRESHOLD",
    "SESSION_VAD_PREFIX_PADDING_MS",
    "SESSION_VAD_SILENCE_DURATION_MS",
    "SESSION_TEMPERATURE",
    "SESSION_MAX_RESPONSE_OUTPUT_TOKENS",
    "SESSION_TOOL_CHOICE",
    "SESSION_INSTRUCTIONS",
    "RESPONSE_CREATE_INSTRUCTIONS",
    "EVT_SESSION_UPDATE",
    "EVT_AUDIO_APPEND",
    "EVT_AUDIO_COMMIT",
    "EVT_RESPONSE_CREATE",
    "EVT_RESPONSE_CANCEL",
    "EVT_SPEECH_STARTED",
    "EVT_SPEECH_STOPPED",
    "EVT_AUDIO_DELTA",
    "EVT_TEXT_DELTA",
    "EVT_RESPONSE_DONE",
    "EVT_ERROR",
]
