"""n8n workflow webhook collaborator."""

from __future__ import annotations

import time
import logging
from typing import Any
from datetime import datetime, timezone
from collections.abc import Callable

import orjson
import aiohttp

from voice_relay.state.settings import WorkflowSettings
from voice_relay.config.workflow import N8N_SOURCE, N8N_USER_AGENT, N8N_HEALTH_TIMEOUT_S

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., aiohttp.ClientSession]

NOT_CONFIGURED_RESULT = {"success": False, "message": "N8N not configured"}
NO_RESPONSE_ERROR = "No response from N8N webhook"
NO_RESPONSE_MESSAGE = "Network or timeout error"


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _json_dumps(value: Any) -> str:
    return orjson.dumps(value).decode("utf-8")


async def _read_body(response: aiohttp.ClientResponse) -> Any:
    text = await response.text()
    if not text:
        return None
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        return text


class WorkflowWebhook:
    """Posts events to the configured n8n webhook.

    Every call returns a result dict; webhook failures are reported in the
    result and never raised.
    """

    def __init__(self, settings: WorkflowSettings, *, session_factory: SessionFactory | None = None) -> None:
        self._settings = settings
        self._session_factory = session_factory or aiohttp.ClientSession

    @property
    def configured(self) -> bool:
        return bool(self._settings.webhook_url)

    async def trigger(self, data: Any) -> dict[str, Any]:
        if not self.configured:
            logger.warning("n8n webhook URL not configured")
            return dict(NOT_CONFIGURED_RESULT)

        body = {"source": N8N_SOURCE, "timestamp": _iso_now(), "data": data}
        headers = {"Content-Type": "application/json", "User-Agent": N8N_USER_AGENT}
        timeout = aiohttp.ClientTimeout(total=self._settings.timeout_s)

        try:
            async with self._session_factory(timeout=timeout, json_serialize=_json_dumps) as session:
                async with session.post(self._settings.webhook_url, json=body, headers=headers) as response:
                    status = response.status
                    payload = await _read_body(response)
        except (aiohttp.ClientError, TimeoutError) as exc:
            logger.error("n8n workflow trigger failed: %s", exc)
            return {"success": False, "error": NO_RESPONSE_ERROR, "message": NO_RESPONSE_MESSAGE}
        except Exception as exc:
            logger.exception("n8n workflow trigger failed")
            return {"success": False, "error": str(exc)}

        if not 200 <= status < 300:
            logger.error("n8n webhook returned HTTP %d", status)
            return {"success": False, "error": payload, "status": status}

        logger.info("n8n workflow triggered status=%d", status)
        return {"success": True, "data": payload, "status": status}

    async def health_check(self) -> dict[str, Any]:
        if not self.configured:
            return {"healthy": False, "message": "Not configured"}

        body = {"type": "health_check", "timestamp": _iso_now()}
        timeout = aiohttp.ClientTimeout(total=N8N_HEALTH_TIMEOUT_S)
        started = time.perf_counter()
        try:
            async with self._session_factory(timeout=timeout, json_serialize=_json_dumps) as session:
                async with session.post(self._settings.webhook_url, json=body) as response:
                    status = response.status
        except (aiohttp.ClientError, TimeoutError) as exc:
            return {"healthy": False, "error": str(exc) or type(exc).__name__}

        if status >= 400:
            return {"healthy": False, "status": status, "error": f"HTTP {status}"}

        return {
            "healthy": True,
            "status": status,
            "response_time_ms": round((time.perf_counter() - started) * 1000.0, 1),
        }

    def status(self) -> dict[str, Any]:
        return {
            "configured": self.configured,
            "webhook_url": "***configured***" if self.configured else "not set",
        }


__all__ = ["WorkflowWebhook"]
