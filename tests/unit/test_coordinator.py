from __future__ import annotations

import pytest
from aiortc import RTCConfiguration, RTCPeerConnection, RTCSessionDescription

from voice_relay.errors import NegotiationError
from voice_relay.webrtc.state import SignalingState
from voice_relay.webrtc.coordinator import PeerNegotiationCoordinator

_OFFER = {"sdp": "v=0\r\nm=audio 9 UDP/TLS/RTP/SAVPF 111\r\na=sendrecv\r\n", "type": "offer"}
_ANSWER = {"sdp": "v=0\r\nm=audio 9 UDP/TLS/RTP/SAVPF 111\r\na=recvonly\r\n", "type": "answer"}


def _candidate(port: int) -> dict:
    return {"candidate": f"candidate:1 1 udp 2122260223 192.168.1.2 {port} typ host", "sdpMid": "0", "sdpMLineIndex": 0}


class _FakeTrack:
    kind = "audio"
    id = "track-1"


class _FakePeer:
    def __init__(self, *, fail_remote: bool = False) -> None:
        self.fail_remote = fail_remote
        self.handlers: dict = {}
        self.remote: RTCSessionDescription | None = None
        self.localDescription: RTCSessionDescription | None = None
        self.applied: list = []
        self.transceivers: list[tuple[str, str]] = []
        self.connectionState = "new"
        self.closed = False

    def on(self, event: str):
        def decorator(fn):
            self.handlers[event] = fn
            return fn

        return decorator

    async def setRemoteDescription(self, desc: RTCSessionDescription) -> None:
        if self.fail_remote:
            raise ValueError("unsupported SDP")
        self.remote = desc

    async def createAnswer(self) -> RTCSessionDescription:
        return RTCSessionDescription(sdp="v=0\r\nanswer\r\n", type="answer")

    async def createOffer(self) -> RTCSessionDescription:
        return RTCSessionDescription(sdp="v=0\r\noffer\r\n", type="offer")

    async def setLocalDescription(self, desc: RTCSessionDescription) -> None:
        self.localDescription = desc

    async def addIceCandidate(self, candidate) -> None:
        self.applied.append(candidate)

    def addTransceiver(self, kind: str, direction: str) -> None:
        self.transceivers.append((kind, direction))

    async def close(self) -> None:
        self.closed = True


class _Harness:
    def __init__(self, **peer_kwargs) -> None:
        self.emitted: list[dict] = []
        self.peers: list[_FakePeer] = []
        self._peer_kwargs = peer_kwargs
        self.coordinator = PeerNegotiationCoordinator(emit=self._emit, peer_factory=self._new_peer)

    async def _emit(self, msg: dict) -> bool:
        self.emitted.append(msg)
        return True

    def _new_peer(self) -> _FakePeer:
        peer = _FakePeer(**self._peer_kwargs)
        self.peers.append(peer)
        return peer


@pytest.mark.asyncio
async def test_offer_produces_answer_and_reaches_stable() -> None:
    h = _Harness()

    answer = await h.coordinator.handle_offer(_OFFER)

    assert answer == {"sdp": "v=0\r\nanswer\r\n", "type": "answer"}
    assert h.emitted == [{"type": "webrtc_answer", "payload": answer}]
    assert h.coordinator.signaling_state is SignalingState.STABLE
    assert h.peers[0].remote.type == "offer"


@pytest.mark.asyncio
async def test_candidates_before_remote_description_drain_in_arrival_order() -> None:
    h = _Harness()
    ports = [5001, 5002, 5003, 5004]

    for port in ports:
        assert await h.coordinator.handle_ice_candidate(_candidate(port)) is False
    assert len(h.coordinator.pending_candidates) == len(ports)

    await h.coordinator.handle_offer(_OFFER)

    assert [c.port for c in h.peers[0].applied] == ports
    assert h.coordinator.pending_candidates == ()


@pytest.mark.asyncio
async def test_candidate_after_remote_description_is_applied_immediately() -> None:
    h = _Harness()
    await h.coordinator.handle_offer(_OFFER)

    assert await h.coordinator.handle_ice_candidate(_candidate(6000)) is True
    assert await h.coordinator.handle_ice_candidate({"candidate": ""}) is True

    assert h.peers[0].applied[0].port == 6000
    assert h.peers[0].applied[1] is None


@pytest.mark.asyncio
async def test_bad_queued_candidate_does_not_block_the_rest() -> None:
    h = _Harness()
    await h.coordinator.handle_ice_candidate(_candidate(5001))
    await h.coordinator.handle_ice_candidate({"candidate": "candidate:garbage"})
    await h.coordinator.handle_ice_candidate(_candidate(5003))

    await h.coordinator.handle_offer(_OFFER)

    assert [c.port for c in h.peers[0].applied] == [5001, 5003]
    assert h.coordinator.pending_candidates == ()


@pytest.mark.asyncio
async def test_offer_while_local_offer_pending_is_rejected_without_mutation() -> None:
    h = _Harness()
    local = await h.coordinator.create_offer()

    with pytest.raises(NegotiationError):
        await h.coordinator.handle_offer(_OFFER)

    assert h.coordinator.signaling_state is SignalingState.HAVE_LOCAL_OFFER
    assert h.coordinator.local_description == local
    assert h.coordinator.remote_description is None
    assert h.peers[0].remote is None


@pytest.mark.asyncio
async def test_stable_session_accepts_renegotiation_offer() -> None:
    h = _Harness()
    await h.coordinator.handle_offer(_OFFER)
    await h.coordinator.handle_offer(_OFFER)

    assert len(h.peers) == 1
    assert h.coordinator.signaling_state is SignalingState.STABLE


@pytest.mark.asyncio
async def test_failed_offer_restores_state_and_discards_new_peer() -> None:
    h = _Harness(fail_remote=True)

    with pytest.raises(NegotiationError):
        await h.coordinator.handle_offer(_OFFER)

    assert h.coordinator.signaling_state is SignalingState.NONE
    assert h.coordinator.has_peer is False
    assert h.peers[0].closed
    assert h.emitted == []


@pytest.mark.asyncio
async def test_invalid_offer_payload_is_rejected() -> None:
    h = _Harness()
    with pytest.raises(NegotiationError):
        await h.coordinator.handle_offer({"type": "offer"})
    assert h.peers == []


@pytest.mark.asyncio
async def test_answer_without_local_offer_is_rejected() -> None:
    h = _Harness()
    with pytest.raises(NegotiationError):
        await h.coordinator.handle_answer(_ANSWER)
    assert h.coordinator.signaling_state is SignalingState.NONE


@pytest.mark.asyncio
async def test_server_offer_then_answer_reaches_stable() -> None:
    h = _Harness()
    await h.coordinator.handle_ice_candidate(_candidate(7000))

    offer = await h.coordinator.create_offer()
    assert h.emitted == [{"type": "webrtc_offer", "payload": offer}]
    assert h.peers[0].transceivers == [("audio", "recvonly")]
    assert h.coordinator.signaling_state is SignalingState.HAVE_LOCAL_OFFER

    await h.coordinator.handle_answer(_ANSWER)

    assert h.coordinator.signaling_state is SignalingState.STABLE
    assert [c.port for c in h.peers[0].applied] == [7000]


@pytest.mark.asyncio
async def test_peer_callbacks_emit_state_and_track_messages() -> None:
    h = _Harness()
    await h.coordinator.handle_offer(_OFFER)
    peer = h.peers[0]

    peer.connectionState = "connected"
    await peer.handlers["connectionstatechange"]()
    await peer.handlers["track"](_FakeTrack())

    assert h.emitted[1:] == [
        {"type": "connection_state", "payload": {"state": "connected"}},
        {"type": "audio_stream_received", "payload": {"streamId": "track-1", "kind": "audio"}},
    ]
    assert len(h.coordinator.remote_tracks) == 1


@pytest.mark.asyncio
async def test_close_is_idempotent_and_resets_state() -> None:
    h = _Harness()
    await h.coordinator.handle_ice_candidate(_candidate(5001))
    await h.coordinator.create_offer()

    await h.coordinator.close()
    await h.coordinator.close()

    assert h.peers[0].closed
    assert h.coordinator.signaling_state is SignalingState.NONE
    assert h.coordinator.pending_candidates == ()
    assert h.coordinator.has_peer is False


@pytest.mark.asyncio
async def test_callbacks_from_closed_peer_are_ignored() -> None:
    h = _Harness()
    await h.coordinator.handle_offer(_OFFER)
    peer = h.peers[0]
    await h.coordinator.close()

    await peer.handlers["connectionstatechange"]()

    assert [m["type"] for m in h.emitted] == ["webrtc_answer"]


@pytest.mark.asyncio
async def test_real_aiortc_peer_answers_browser_offer() -> None:
    # No ICE servers keeps gathering to host candidates.
    def local_peer() -> RTCPeerConnection:
        return RTCPeerConnection(configuration=RTCConfiguration(iceServers=[]))

    emitted: list[dict] = []

    async def emit(msg: dict) -> bool:
        emitted.append(msg)
        return True

    browser = local_peer()
    coordinator = PeerNegotiationCoordinator(emit=emit, peer_factory=local_peer)
    try:
        browser.addTransceiver("audio", direction="sendrecv")
        await browser.setLocalDescription(await browser.createOffer())

        answer = await coordinator.handle_offer({"sdp": browser.localDescription.sdp, "type": "offer"})

        assert answer["type"] == "answer"
        assert "m=audio" in answer["sdp"]
        assert coordinator.signaling_state is SignalingState.STABLE
        assert emitted[-1] == {"type": "webrtc_answer", "payload": answer}

        await browser.setRemoteDescription(RTCSessionDescription(sdp=answer["sdp"], type=answer["type"]))
        assert browser.signalingState == "stable"

        applied = await coordinator.handle_ice_candidate({"candidate": "", "sdpMid": "0", "sdpMLineIndex": 0})
        assert applied is True
        assert coordinator.signaling_state is SignalingState.STABLE
    finally:
        await coordinator.close()
        await browser.close()
