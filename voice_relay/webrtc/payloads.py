"""Conversion between browser signaling payloads and aiortc objects."""

from __future__ import annotations

from typing import Any

from aiortc import RTCIceCandidate, RTCSessionDescription
from aiortc.sdp import candidate_from_sdp

from voice_relay.errors import NegotiationError

_DIRECTION_ATTRIBUTES = ("a=sendrecv", "a=sendonly", "a=recvonly", "a=inactive")


def ensure_media_directions(sdp: str) -> str:
    """Add an explicit direction to media sections that omit one.

    iOS Safari can emit media sections without a direction attribute, which
    aiortc rejects. RFC 4566 defines the implicit default as sendrecv.
    """
    lines = sdp.split("\r\n")
    trailing_blank = bool(lines) and lines[-1] == ""
    if trailing_blank:
        lines = lines[:-1]

    result: list[str] = []
    in_media = False
    has_direction = False
    for line in lines:
        if line.startswith("m="):
            if in_media and not has_direction:
                result.append("a=sendrecv")
            in_media = True
            has_direction = False
        elif in_media and line.startswith(_DIRECTION_ATTRIBUTES):
            has_direction = True
        result.append(line)
    if in_media and not has_direction:
        result.append("a=sendrecv")

    if trailing_blank:
        result.append("")
    return "\r\n".join(result)


def parse_session_description(payload: Any, expected_type: str) -> RTCSessionDescription:
    if not isinstance(payload, dict):
        raise NegotiationError(f"{expected_type} payload must be an object")
    sdp = payload.get("sdp")
    if not isinstance(sdp, str) or not sdp.strip():
        raise NegotiationError(f"{expected_type} payload missing non-empty 'sdp'")
    desc_type = payload.get("type", expected_type)
    if desc_type != expected_type:
        raise NegotiationError(f"expected session description of type '{expected_type}', got '{desc_type}'")
    return RTCSessionDescription(sdp=ensure_media_directions(sdp), type=expected_type)


def description_to_payload(description: RTCSessionDescription) -> dict[str, str]:
    return {"sdp": description.sdp, "type": description.type}


def parse_ice_candidate(payload: Any) -> RTCIceCandidate | None:
    """Build an aiortc candidate from a browser RTCIceCandidateInit.

    Returns None for the end-of-candidates marker (empty candidate string).
    """
    if not isinstance(payload, dict):
        raise NegotiationError("ICE candidate payload must be an object")

    candidate_str = payload.get("candidate")
    if candidate_str is None or candidate_str == "":
        return None
    if not isinstance(candidate_str, str):
        raise NegotiationError("ICE candidate 'candidate' must be a string")

    value = candidate_str.strip()
    if value.startswith("candidate:"):
        value = value.split("candidate:", 1)[1]

    try:
        candidate = candidate_from_sdp(value)
    except (AssertionError, ValueError, IndexError) as exc:
        raise NegotiationError(f"invalid ICE candidate: {candidate_str!r}") from exc

    candidate.sdpMid = payload.get("sdpMid")
    candidate.sdpMLineIndex = payload.get("sdpMLineIndex")
    return candidate


__all__ = [
    "description_to_payload",
    "ensure_media_directions",
    "parse_ice_candidate",
    "parse_session_description",
]
