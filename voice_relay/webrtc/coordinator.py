"""WebRTC offer/answer negotiation for one client connection."""

from __future__ import annotations

import logging
import contextlib
from typing import Any
from collections import deque
from collections.abc import Callable, Awaitable

from voice_relay.errors import NegotiationError
from voice_relay.config.websocket import (
    MSG_WEBRTC_OFFER,
    MSG_WEBRTC_ANSWER,
    MSG_CONNECTION_STATE,
    MSG_AUDIO_STREAM_RECEIVED,
)

from .state import SignalingState
from .payloads import description_to_payload, parse_ice_candidate, parse_session_description

logger = logging.getLogger(__name__)

EmitFn = Callable[[dict[str, Any]], Awaitable[Any]]
PeerFactory = Callable[[], Any]

_OFFER_STATES = (SignalingState.NONE, SignalingState.STABLE)


class PeerNegotiationCoordinator:
    """Drives the server side of the browser's offer/answer exchange.

    ICE candidates received before a remote description exists are queued in
    arrival order and drained once when the remote description is set.
    Signaling replies go out through `emit`.
    """

    def __init__(self, *, emit: EmitFn, peer_factory: PeerFactory) -> None:
        self._emit = emit
        self._peer_factory = peer_factory
        self._pc: Any | None = None
        self._state = SignalingState.NONE
        self._has_remote_description = False
        self._pending_candidates: deque[dict[str, Any]] = deque()
        self._remote_tracks: list[Any] = []
        self._local_description: dict[str, str] | None = None
        self._remote_description: dict[str, str] | None = None

    @property
    def signaling_state(self) -> SignalingState:
        return self._state

    @property
    def has_peer(self) -> bool:
        return self._pc is not None

    @property
    def pending_candidates(self) -> tuple[dict[str, Any], ...]:
        return tuple(self._pending_candidates)

    @property
    def remote_tracks(self) -> tuple[Any, ...]:
        return tuple(self._remote_tracks)

    @property
    def local_description(self) -> dict[str, str] | None:
        return self._local_description

    @property
    def remote_description(self) -> dict[str, str] | None:
        return self._remote_description

    async def handle_offer(self, payload: Any) -> dict[str, str]:
        if self._state not in _OFFER_STATES:
            raise NegotiationError(f"cannot accept an offer in signaling state '{self._state.value}'")
        offer = parse_session_description(payload, "offer")

        previous_state = self._state
        previous_remote = self._remote_description
        previous_has_remote = self._has_remote_description
        created = self._pc is None
        pc = self._ensure_peer()

        try:
            await pc.setRemoteDescription(offer)
            self._state = SignalingState.HAVE_REMOTE_OFFER
            self._remote_description = description_to_payload(offer)
            self._has_remote_description = True
            await self._drain_pending_candidates()
            answer = await pc.createAnswer()
            await pc.setLocalDescription(answer)
        except Exception as exc:
            self._state = previous_state
            self._remote_description = previous_remote
            self._has_remote_description = previous_has_remote
            if created:
                await self._discard_peer(pc)
            raise NegotiationError(f"failed to handle WebRTC offer: {exc}") from exc

        local = description_to_payload(pc.localDescription or answer)
        self._local_description = local
        self._state = SignalingState.STABLE
        logger.info("WebRTC answer created")
        await self._emit({"type": MSG_WEBRTC_ANSWER, "payload": local})
        return local

    async def handle_answer(self, payload: Any) -> None:
        if self._state is not SignalingState.HAVE_LOCAL_OFFER or self._pc is None:
            raise NegotiationError(f"cannot accept an answer in signaling state '{self._state.value}'")
        answer = parse_session_description(payload, "answer")

        try:
            await self._pc.setRemoteDescription(answer)
        except Exception as exc:
            raise NegotiationError(f"failed to handle WebRTC answer: {exc}") from exc

        self._remote_description = description_to_payload(answer)
        self._has_remote_description = True
        self._state = SignalingState.STABLE
        logger.info("WebRTC answer applied")
        await self._drain_pending_candidates()

    async def handle_ice_candidate(self, payload: Any) -> bool:
        """Apply a candidate now, or queue it until a remote description exists.

        Returns True when the candidate was applied immediately.
        """
        if not isinstance(payload, dict):
            raise NegotiationError("ICE candidate payload must be an object")
        if self._pc is None or not self._has_remote_description:
            self._pending_candidates.append(payload)
            logger.debug("queued ICE candidate (%d pending)", len(self._pending_candidates))
            return False
        try:
            await self._apply_candidate(payload)
        except Exception:
            logger.warning("failed to apply ICE candidate", exc_info=True)
        return True

    async def create_offer(self) -> dict[str, str]:
        if self._state not in _OFFER_STATES:
            raise NegotiationError(f"cannot create an offer in signaling state '{self._state.value}'")

        created = self._pc is None
        pc = self._ensure_peer()
        try:
            if created:
                pc.addTransceiver("audio", direction="recvonly")
            offer = await pc.createOffer()
            await pc.setLocalDescription(offer)
        except Exception as exc:
            if created:
                await self._discard_peer(pc)
            raise NegotiationError(f"failed to create WebRTC offer: {exc}") from exc

        local = description_to_payload(pc.localDescription or offer)
        self._local_description = local
        self._state = SignalingState.HAVE_LOCAL_OFFER
        logger.info("WebRTC offer created")
        await self._emit({"type": MSG_WEBRTC_OFFER, "payload": local})
        return local

    async def close(self) -> None:
        pc = self._pc
        self._pc = None
        self._state = SignalingState.NONE
        self._has_remote_description = False
        self._pending_candidates.clear()
        self._remote_tracks.clear()
        self._local_description = None
        self._remote_description = None
        if pc is None:
            return
        with contextlib.suppress(Exception):
            await pc.close()
        logger.info("WebRTC peer connection closed")

    def _ensure_peer(self) -> Any:
        if self._pc is not None:
            return self._pc
        pc = self._peer_factory()
        self._register_callbacks(pc)
        self._pc = pc
        return pc

    def _register_callbacks(self, pc: Any) -> None:
        @pc.on("connectionstatechange")
        async def _on_connection_state_change() -> None:
            if self._pc is not pc:
                return
            state = pc.connectionState
            logger.info("WebRTC connection state: %s", state)
            if state == "failed":
                logger.warning("WebRTC connection failed; waiting for the client to renegotiate")
            await self._emit({"type": MSG_CONNECTION_STATE, "payload": {"state": state}})

        @pc.on("track")
        async def _on_track(track: Any) -> None:
            if self._pc is not pc:
                return
            self._remote_tracks.append(track)
            logger.info("received remote %s track id=%s", track.kind, track.id)
            await self._emit(
                {
                    "type": MSG_AUDIO_STREAM_RECEIVED,
                    "payload": {"streamId": track.id, "kind": track.kind},
                }
            )

    async def _discard_peer(self, pc: Any) -> None:
        if self._pc is pc:
            self._pc = None
        with contextlib.suppress(Exception):
            await pc.close()

    async def _apply_candidate(self, payload: dict[str, Any]) -> None:
        candidate = parse_ice_candidate(payload)
        await self._pc.addIceCandidate(candidate)

    async def _drain_pending_candidates(self) -> None:
        if not self._pending_candidates:
            return
        pending = list(self._pending_candidates)
        self._pending_candidates.clear()
        logger.debug("draining %d queued ICE candidates", len(pending))
        for payload in pending:
            try:
                await self._apply_candidate(payload)
            except Exception:
                logger.warning("failed to apply queued ICE candidate", exc_info=True)


__all__ = ["PeerNegotiationCoordinator"]
