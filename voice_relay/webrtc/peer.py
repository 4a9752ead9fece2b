"""aiortc peer connection construction."""

from __future__ import annotations

from aiortc import RTCIceServer, RTCConfiguration, RTCPeerConnection

from voice_relay.state.settings import WebRTCSettings


def build_rtc_configuration(settings: WebRTCSettings) -> RTCConfiguration | None:
    if not settings.ice_servers:
        return None
    ice_servers = [
        RTCIceServer(
            urls=server.urls,
            username=server.username,
            credential=server.credential,
        )
        for server in settings.ice_servers
    ]
    return RTCConfiguration(iceServers=ice_servers)


class PeerConnectionFactory:
    """Creates one aiortc peer connection per negotiation coordinator."""

    def __init__(self, settings: WebRTCSettings) -> None:
        self._configuration = build_rtc_configuration(settings)

    def __call__(self) -> RTCPeerConnection:
        return RTCPeerConnection(configuration=self._configuration)


__all__ = ["PeerConnectionFactory", "build_rtc_configuration"]
