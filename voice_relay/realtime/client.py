"""Client for one upstream OpenAI Realtime session."""

from __future__ import annotations

import base64
import asyncio
import logging
import contextlib
from typing import Any
from urllib.parse import urlencode
from collections.abc import Callable, Awaitable, AsyncIterator

import orjson
import websockets
from websockets.exceptions import InvalidURI, ConnectionClosed, InvalidHandshake

from voice_relay.state.settings import UpstreamSettings
from voice_relay.errors import UpstreamUnavailable, UpstreamProtocolError
from voice_relay.config.upstream import UPSTREAM_BETA_HEADER, UPSTREAM_MAX_MESSAGE_BYTES

from .events import RelayEvent
from .translate import parse_upstream_event, translate_upstream_event
from .session_config import (
    build_audio_append,
    build_audio_commit,
    build_response_cancel,
    build_response_create,
    build_session_update,
)

logger = logging.getLogger(__name__)

ConnectFn = Callable[..., Awaitable[Any]]


def build_realtime_url(base_url: str, model: str) -> str:
    sep = "&" if "?" in base_url else "?"
    return f"{base_url}{sep}{urlencode({'model': model})}"


class UpstreamSessionClient:
    """Owns at most one live connection to the realtime AI service.

    Inbound upstream traffic is consumed through `events()`, which yields
    relay events in the order the upstream delivers them.
    """

    def __init__(self, settings: UpstreamSettings, *, connect: ConnectFn | None = None) -> None:
        self._settings = settings
        self._connect = connect or websockets.connect
        self._ws: Any | None = None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected and self._ws is not None

    async def start(self) -> bool:
        """Open the upstream connection and send the session configuration.

        Returns False when a connection is already live.
        """
        if self.connected:
            logger.info("upstream session already active; ignoring redundant start")
            return False
        if not self._settings.api_key:
            raise UpstreamUnavailable("OpenAI API key is not configured")

        url = build_realtime_url(self._settings.url, self._settings.model)
        try:
            ws = await asyncio.wait_for(
                self._connect(
                    url,
                    additional_headers=[
                        ("Authorization", f"Bearer {self._settings.api_key}"),
                        UPSTREAM_BETA_HEADER,
                    ],
                    max_size=UPSTREAM_MAX_MESSAGE_BYTES,
                    open_timeout=None,
                ),
                timeout=self._settings.open_timeout_s,
            )
        except TimeoutError as exc:
            raise UpstreamUnavailable(
                f"upstream open timed out after {self._settings.open_timeout_s:.1f}s"
            ) from exc
        except (InvalidHandshake, InvalidURI, OSError) as exc:
            raise UpstreamUnavailable(f"upstream open failed: {exc}") from exc

        self._ws = ws
        self._connected = True
        logger.info("connected to realtime service model=%s", self._settings.model)

        if not await self._send(build_session_update()):
            await self.end()
            raise UpstreamUnavailable("upstream closed before the session could be configured")
        return True

    async def send_audio_frame(self, frame: bytes | str) -> None:
        if not self.connected:
            logger.warning("cannot send audio: upstream not connected")
            return
        audio = base64.b64encode(frame).decode("ascii") if isinstance(frame, (bytes, bytearray)) else frame
        await self._send(build_audio_append(audio))

    async def commit_audio_buffer(self) -> None:
        if not self.connected:
            logger.warning("cannot commit audio: upstream not connected")
            return
        await self._send(build_audio_commit())

    async def create_response(self) -> None:
        if not self.connected:
            logger.warning("cannot create response: upstream not connected")
            return
        await self._send(build_response_create())

    async def cancel_response(self, response_id: str | None) -> None:
        if not self.connected:
            logger.warning("cannot cancel response: upstream not connected")
            return
        await self._send(build_response_cancel(response_id))

    async def events(self) -> AsyncIterator[RelayEvent]:
        ws = self._ws
        if ws is None:
            return
        try:
            async for raw in ws:
                try:
                    relay = translate_upstream_event(parse_upstream_event(raw))
                except UpstreamProtocolError as exc:
                    logger.warning("dropping malformed upstream event: %s", exc)
                    continue
                if relay is not None:
                    yield relay
        except ConnectionClosed as exc:
            logger.info("upstream connection closed: %s", exc)
        finally:
            if self._ws is ws:
                self._connected = False
            logger.debug("upstream receive loop finished")

    async def end(self) -> None:
        ws = self._ws
        self._ws = None
        self._connected = False
        if ws is None:
            return
        with contextlib.suppress(Exception):
            await ws.close()
        logger.info("upstream realtime session ended")

    async def _send(self, message: dict[str, Any]) -> bool:
        ws = self._ws
        if ws is None:
            return False
        try:
            await ws.send(orjson.dumps(message).decode("utf-8"))
        except ConnectionClosed:
            logger.warning("upstream closed while sending %s", message.get("type"))
            self._connected = False
            return False
        return True


__all__ = ["UpstreamSessionClient", "build_realtime_url"]
