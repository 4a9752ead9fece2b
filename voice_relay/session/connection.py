"""Per-client session aggregate: owns sub-components and routes messages."""

from __future__ import annotations

import time
import uuid
import asyncio
import logging
import contextlib
from typing import Any
from datetime import datetime, timezone
from collections.abc import Callable, Awaitable

from voice_relay.webrtc.state import SignalingState
from voice_relay.workflow import WorkflowWebhook
from voice_relay.realtime.client import UpstreamSessionClient
from voice_relay.errors import NegotiationError, UpstreamUnavailable
from voice_relay.handlers.websocket.errors import build_error, build_envelope
from voice_relay.webrtc.coordinator import PeerFactory, PeerNegotiationCoordinator
from voice_relay.config.websocket import (
    MSG_PING,
    MSG_PONG,
    MSG_AUDIO_DATA,
    MSG_END_SESSION,
    MSG_TRIGGER_N8N,
    MSG_COMMIT_AUDIO,
    MSG_N8N_RESPONSE,
    MSG_WEBRTC_OFFER,
    MSG_START_SESSION,
    MSG_WEBRTC_ANSWER,
    MSG_SESSION_ENDED,
    MSG_CANCEL_RESPONSE,
    MSG_CREATE_RESPONSE,
    MSG_SESSION_STARTED,
    WS_SESSION_ENDED_MESSAGE,
    MSG_WEBRTC_ICE_CANDIDATE,
    MSG_WEBRTC_REQUEST_OFFER,
    WS_SESSION_STARTED_MESSAGE,
)

from .phase import SessionPhase
from .messages import relay_event_to_message

logger = logging.getLogger(__name__)

SendFn = Callable[[dict[str, Any]], Awaitable[bool]]
HandlerFn = Callable[["ConnectionSession", Any], Awaitable[None]]

_NEGOTIATING_STATES = (SignalingState.HAVE_LOCAL_OFFER, SignalingState.HAVE_REMOTE_OFFER)


class ConnectionSession:
    """Everything one client socket owns.

    Inbound handlers and relay steps run under a per-session lock, so no two
    of them interleave. Teardown cascades to the upstream client and the
    negotiation coordinator and is safe from any state.
    """

    def __init__(
        self,
        send: SendFn,
        *,
        upstream: UpstreamSessionClient,
        peer_factory: PeerFactory,
        workflow: WorkflowWebhook,
        now_fn: Callable[[], float] | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex
        self._send = send
        self._now = now_fn or time.monotonic
        self.upstream = upstream
        self.negotiation = PeerNegotiationCoordinator(emit=send, peer_factory=peer_factory)
        self.workflow = workflow
        self.last_activity = self._now()
        self._lock = asyncio.Lock()
        self._relay_task: asyncio.Task | None = None
        self._workflow_tasks: set[asyncio.Task] = set()
        self._upstream_opening = False
        self._closed = False

    @property
    def phase(self) -> SessionPhase:
        if self._closed:
            return SessionPhase.ENDED
        signaling = self.negotiation.signaling_state
        if self._upstream_opening or signaling in _NEGOTIATING_STATES:
            return SessionPhase.NEGOTIATING
        if self.upstream.connected or signaling is SignalingState.STABLE:
            return SessionPhase.ACTIVE
        return SessionPhase.IDLE

    @property
    def closed(self) -> bool:
        return self._closed

    def touch(self) -> None:
        self.last_activity = self._now()

    async def dispatch(self, msg_type: str, payload: Any = None) -> None:
        """Route one parsed client message to its handler.

        Signaling and upstream failures are reported to the client; the
        session stays usable.
        """
        if self._closed:
            logger.warning("session %s: dropping %s after teardown", self.id, msg_type)
            return
        self.touch()

        handler = HANDLERS.get(msg_type)
        async with self._lock:
            if handler is None:
                await self._send(build_error(f"Unknown message type: {msg_type}"))
                return
            try:
                await handler(self, payload)
            except UpstreamUnavailable as exc:
                logger.warning("session %s: upstream unavailable: %s", self.id, exc)
                await self._send(build_error(str(exc), code="upstream_unavailable"))
            except NegotiationError as exc:
                logger.warning("session %s: negotiation failed: %s", self.id, exc)
                await self._send(build_error(str(exc), code="negotiation_failed"))
            except Exception:
                logger.exception("session %s: handler for %s failed", self.id, msg_type)
                await self._send(build_error(f"Failed to handle message: {msg_type}", code="internal_error"))

    async def teardown(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._stop_relay()
        await self._cancel_workflow_tasks()
        with contextlib.suppress(Exception):
            await self.upstream.end()
        with contextlib.suppress(Exception):
            await self.negotiation.close()
        logger.info("session %s torn down", self.id)

    async def _start_upstream(self, _payload: Any) -> None:
        self._upstream_opening = True
        try:
            started = await self.upstream.start()
        finally:
            self._upstream_opening = False
        if started:
            await self._stop_relay()
            self._relay_task = asyncio.create_task(self._relay_upstream_events())
        await self._send(build_envelope(MSG_SESSION_STARTED, message=WS_SESSION_STARTED_MESSAGE))

    async def _end_session(self, _payload: Any) -> None:
        await self._stop_relay()
        await self.upstream.end()
        await self.negotiation.close()
        await self._send(build_envelope(MSG_SESSION_ENDED, message=WS_SESSION_ENDED_MESSAGE))

    async def _forward_audio(self, payload: Any) -> None:
        if isinstance(payload, dict):
            payload = payload.get("audio")
        if not isinstance(payload, (str, bytes)) or not payload:
            logger.warning("session %s: audio_data without audio payload", self.id)
            return
        await self.upstream.send_audio_frame(payload)

    async def _webrtc_offer(self, payload: Any) -> None:
        await self.negotiation.handle_offer(payload)

    async def _webrtc_answer(self, payload: Any) -> None:
        await self.negotiation.handle_answer(payload)

    async def _webrtc_ice_candidate(self, payload: Any) -> None:
        await self.negotiation.handle_ice_candidate(payload)

    async def _webrtc_request_offer(self, _payload: Any) -> None:
        await self.negotiation.create_offer()

    async def _commit_audio(self, _payload: Any) -> None:
        await self.upstream.commit_audio_buffer()

    async def _create_response(self, _payload: Any) -> None:
        await self.upstream.create_response()

    async def _cancel_response(self, payload: Any) -> None:
        response_id = payload.get("response_id") if isinstance(payload, dict) else None
        await self.upstream.cancel_response(response_id if isinstance(response_id, str) else None)

    async def _trigger_workflow(self, payload: Any) -> None:
        timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        if isinstance(payload, dict):
            data = {**payload, "timestamp": timestamp}
        else:
            data = {"data": payload, "timestamp": timestamp}
        # Runs outside the session lock; the reply is serialized when it lands.
        task = asyncio.create_task(self._run_workflow(data))
        self._workflow_tasks.add(task)
        task.add_done_callback(self._workflow_tasks.discard)

    async def _run_workflow(self, data: dict[str, Any]) -> None:
        try:
            result = await self.workflow.trigger(data)
        except asyncio.CancelledError:
            return
        except Exception as exc:
            logger.exception("session %s: workflow trigger failed", self.id)
            result = {"success": False, "error": str(exc)}
        if self._closed:
            return
        async with self._lock:
            await self._send(build_envelope(MSG_N8N_RESPONSE, payload=result))

    async def _cancel_workflow_tasks(self) -> None:
        tasks = list(self._workflow_tasks)
        self._workflow_tasks.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(Exception, asyncio.CancelledError):
                await task

    async def _pong(self, _payload: Any) -> None:
        await self._send(build_envelope(MSG_PONG))

    async def _relay_upstream_events(self) -> None:
        try:
            async for event in self.upstream.events():
                async with self._lock:
                    await self._send(relay_event_to_message(event))
        except asyncio.CancelledError:
            return
        except Exception:
            logger.exception("session %s: upstream relay failed", self.id)

    async def _stop_relay(self) -> None:
        task = self._relay_task
        self._relay_task = None
        if task is None or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(Exception):
            await task


HANDLERS: dict[str, HandlerFn] = {
    MSG_START_SESSION: ConnectionSession._start_upstream,
    MSG_END_SESSION: ConnectionSession._end_session,
    MSG_AUDIO_DATA: ConnectionSession._forward_audio,
    MSG_WEBRTC_OFFER: ConnectionSession._webrtc_offer,
    MSG_WEBRTC_ANSWER: ConnectionSession._webrtc_answer,
    MSG_WEBRTC_ICE_CANDIDATE: ConnectionSession._webrtc_ice_candidate,
    MSG_WEBRTC_REQUEST_OFFER: ConnectionSession._webrtc_request_offer,
    MSG_COMMIT_AUDIO: ConnectionSession._commit_audio,
    MSG_CREATE_RESPONSE: ConnectionSession._create_response,
    MSG_CANCEL_RESPONSE: ConnectionSession._cancel_response,
    MSG_TRIGGER_N8N: ConnectionSession._trigger_workflow,
    MSG_PING: ConnectionSession._pong,
}

__all__ = ["HANDLERS", "ConnectionSession"]
