from __future__ import annotations

import pytest

from voice_relay.errors import NegotiationError
from voice_relay.webrtc.payloads import (
    parse_ice_candidate,
    description_to_payload,
    ensure_media_directions,
    parse_session_description,
)

_SAFARI_OFFER = "\r\n".join(
    [
        "v=0",
        "o=- 1 2 IN IP4 127.0.0.1",
        "s=-",
        "t=0 0",
        "m=audio 9 UDP/TLS/RTP/SAVPF 111",
        "a=mid:0",
        "a=rtpmap:111 opus/48000/2",
        "m=audio 9 UDP/TLS/RTP/SAVPF 111",
        "a=mid:1",
        "a=recvonly",
        "",
    ]
)


def test_ensure_media_directions_fills_missing_direction_only() -> None:
    fixed = ensure_media_directions(_SAFARI_OFFER)
    lines = fixed.split("\r\n")
    first_section = lines[lines.index("m=audio 9 UDP/TLS/RTP/SAVPF 111") : lines.index("a=mid:1")]
    assert "a=sendrecv" in first_section
    assert fixed.count("a=recvonly") == 1
    assert fixed.count("a=sendrecv") == 1
    assert fixed.endswith("\r\n")


def test_ensure_media_directions_leaves_complete_sdp_alone() -> None:
    sdp = "v=0\r\nm=audio 9 RTP/AVP 0\r\na=sendonly\r\n"
    assert ensure_media_directions(sdp) == sdp


def test_parse_session_description_round_trips_type() -> None:
    desc = parse_session_description({"sdp": "v=0\r\n", "type": "offer"}, "offer")
    assert description_to_payload(desc) == {"sdp": "v=0\r\n", "type": "offer"}


@pytest.mark.parametrize(
    "payload",
    [None, "v=0", {"type": "offer"}, {"sdp": "   ", "type": "offer"}, {"sdp": "v=0\r\n", "type": "answer"}],
)
def test_parse_session_description_rejects_invalid_payloads(payload) -> None:
    with pytest.raises(NegotiationError):
        parse_session_description(payload, "offer")


def test_parse_ice_candidate_from_browser_init() -> None:
    candidate = parse_ice_candidate(
        {
            "candidate": "candidate:842163049 1 udp 1677729535 203.0.113.7 54321 typ srflx raddr 10.0.0.2 rport 5000",
            "sdpMid": "0",
            "sdpMLineIndex": 0,
        }
    )
    assert candidate is not None
    assert candidate.foundation == "842163049"
    assert candidate.ip == "203.0.113.7"
    assert candidate.port == 54321
    assert candidate.type == "srflx"
    assert candidate.sdpMid == "0"
    assert candidate.sdpMLineIndex == 0


@pytest.mark.parametrize("payload", [{"candidate": ""}, {"candidate": None, "sdpMid": "0"}, {}])
def test_empty_candidate_marks_end_of_candidates(payload: dict) -> None:
    assert parse_ice_candidate(payload) is None


@pytest.mark.parametrize("payload", ["candidate:1", {"candidate": "candidate:garbage"}, {"candidate": 12}])
def test_parse_ice_candidate_rejects_garbage(payload) -> None:
    with pytest.raises(NegotiationError):
        parse_ice_candidate(payload)
