"""Smoke client: checks server health and drives one relay session over WebSocket."""

from __future__ import annotations

import base64
import asyncio
import logging
from typing import Any
from urllib.parse import urlparse, urlunparse

import orjson
import aiohttp
import websockets

from voice_relay.config.websocket import (
    MSG_PING,
    MSG_PONG,
    MSG_ERROR,
    MSG_CONNECTED,
    MSG_AUDIO_DATA,
    MSG_END_SESSION,
    MSG_COMMIT_AUDIO,
    MSG_SESSION_ENDED,
    MSG_START_SESSION,
    MSG_SESSION_STARTED,
)
from voice_relay.config.client import (
    CLIENT_AUDIO_CHUNK_MS,
    CLIENT_HTTP_TIMEOUT_S,
    CLIENT_REPLY_TIMEOUT_S,
    CLIENT_MAX_MESSAGE_BYTES,
    CLIENT_AUDIO_SAMPLE_RATE_HZ,
)

from .backoff import connect_with_retry

logger = logging.getLogger(__name__)


def ws_url(server: str, secure: bool, path: str = "/") -> str:
    server = (server or "").strip()
    if server.startswith(("ws://", "wss://")):
        return server
    if server.startswith(("http://", "https://")):
        parsed = urlparse(server)
        scheme = "wss" if parsed.scheme == "https" or secure else "ws"
        return urlunparse((scheme, parsed.netloc, parsed.path or path, "", parsed.query, ""))
    scheme = "wss" if secure else "ws"
    return f"{scheme}://{server.rstrip('/')}{path}"


def http_base_url(server: str, secure: bool) -> str:
    server = (server or "").strip()
    parsed = urlparse(server if "://" in server else f"//{server}")
    scheme = "https" if secure or parsed.scheme in ("https", "wss") else "http"
    return f"{scheme}://{parsed.netloc}"


def silence_frames(duration_ms: int) -> list[str]:
    """Base64 pcm16 chunks of digital silence."""
    samples_per_chunk = CLIENT_AUDIO_SAMPLE_RATE_HZ * CLIENT_AUDIO_CHUNK_MS // 1000
    chunk = base64.b64encode(b"\x00\x00" * samples_per_chunk).decode("ascii")
    return [chunk] * max(0, duration_ms // CLIENT_AUDIO_CHUNK_MS)


async def fetch_json(session: aiohttp.ClientSession, url: str) -> dict[str, Any]:
    async with session.get(url) as response:
        response.raise_for_status()
        return orjson.loads(await response.read())


async def check_server(base_url: str) -> dict[str, Any]:
    timeout = aiohttp.ClientTimeout(total=CLIENT_HTTP_TIMEOUT_S)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        return {
            "health": await fetch_json(session, f"{base_url}/health"),
            "status": await fetch_json(session, f"{base_url}/api/status"),
        }


async def _send(ws: Any, msg_type: str, payload: Any | None = None) -> None:
    msg: dict[str, Any] = {"type": msg_type}
    if payload is not None:
        msg["payload"] = payload
    await ws.send(orjson.dumps(msg).decode("utf-8"))


async def _expect(ws: Any, expected: str, seen: list[str]) -> dict[str, Any]:
    """Read frames until `expected` arrives; an error frame aborts the wait."""
    while True:
        raw = await asyncio.wait_for(ws.recv(), timeout=CLIENT_REPLY_TIMEOUT_S)
        msg = orjson.loads(raw)
        msg_type = msg.get("type")
        seen.append(msg_type)
        logger.debug("recv %s", msg_type)
        if msg_type == expected:
            return msg
        if msg_type == MSG_ERROR:
            raise RuntimeError(msg.get("message") or "server error")


async def run_session(url: str, *, audio_ms: int = 0) -> dict[str, Any]:
    seen: list[str] = []
    frames = silence_frames(audio_ms)
    ws = await connect_with_retry(lambda: websockets.connect(url, max_size=CLIENT_MAX_MESSAGE_BYTES))
    try:
        await _expect(ws, MSG_CONNECTED, seen)
        await _send(ws, MSG_PING)
        await _expect(ws, MSG_PONG, seen)

        await _send(ws, MSG_START_SESSION)
        await _expect(ws, MSG_SESSION_STARTED, seen)

        for frame in frames:
            await _send(ws, MSG_AUDIO_DATA, frame)
        if frames:
            await _send(ws, MSG_COMMIT_AUDIO)

        await _send(ws, MSG_END_SESSION)
        await _expect(ws, MSG_SESSION_ENDED, seen)
    finally:
        await ws.close()
    return {"frames_sent": len(frames), "messages": seen}


__all__ = ["check_server", "http_base_url", "run_session", "silence_frames", "ws_url"]
