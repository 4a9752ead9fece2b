"""n8n workflow webhook configuration."""

from __future__ import annotations

ENV_N8N_WEBHOOK_URL = "N8N_WEBHOOK_URL"
ENV_N8N_TIMEOUT_S = "N8N_TIMEOUT_S"

DEFAULT_N8N_TIMEOUT_S = 10.0
N8N_HEALTH_TIMEOUT_S = 5.0

N8N_SOURCE = "voice-agent"
N8N_USER_AGENT = "Priyo-Voice-Agent/1.0"

__all__ = [
    "ENV_N8N_WEBHOOK_URL",
    "ENV_N8N_TIMEOUT_S",
    "DEFAULT_N8N_TIMEOUT_S",
    "N8N_HEALTH_TIMEOUT_S",
    "N8N_SOURCE",
    "N8N_USER_AGENT",
]
