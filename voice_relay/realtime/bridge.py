"""Factory for per-connection upstream session clients."""

from __future__ import annotations

from voice_relay.state.settings import UpstreamSettings

from .client import ConnectFn, UpstreamSessionClient


class RealtimeBridge:
    def __init__(self, *, settings: UpstreamSettings, connect: ConnectFn | None = None) -> None:
        self._settings = settings
        self._connect = connect

    @property
    def configured(self) -> bool:
        return bool(self._settings.api_key)

    def new_client(self) -> UpstreamSessionClient:
        return UpstreamSessionClient(self._settings, connect=self._connect)


__all__ = ["RealtimeBridge"]
