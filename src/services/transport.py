# src/services/transport.py

"""WebSocket transport used by the live update channel."""

import logging
from typing import Any, Protocol

from curl_cffi.requests import AsyncSession

from src.config.settings import Settings

logger = logging.getLogger("catalog_sync.transport")


class TransportClosed(ConnectionError):
    """The peer closed the connection."""


class WebSocketTransport(Protocol):
    """A text-frame duplex connection."""

    async def connect(self) -> None: ...

    async def send(self, text: str) -> None: ...

    async def recv(self) -> str: ...

    async def close(self) -> None: ...


class CurlWebSocketTransport:
    """WebSocket over ``curl_cffi`` with browser impersonation."""

    def __init__(self, url: str | None = None) -> None:
        self.settings = Settings()
        self.url = url or self.settings.ws_url()
        self._session: AsyncSession | None = None
        self._ws: Any = None

    async def connect(self) -> None:
        self._session = AsyncSession(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        logger.debug("Opening WebSocket %s", self.url)
        self._ws = await self._session.ws_connect(self.url)

    async def send(self, text: str) -> None:
        if self._ws is None:
            raise TransportClosed("WebSocket is not open")
        await self._ws.send_str(text)

    async def recv(self) -> str:
        if self._ws is None:
            raise TransportClosed("WebSocket is not open")
        text: str = await self._ws.recv_str()
        return text

    async def close(self) -> None:
        ws, session = self._ws, self._session
        self._ws = None
        self._session = None
        try:
            if ws is not None:
                await ws.close()
        finally:
            if session is not None:
                await session.close()
