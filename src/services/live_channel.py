# src/services/live_channel.py

"""Push channel: STOMP subscription with fixed-delay reconnection.

State machine::

    DISCONNECTED --start / reconnect timer--> CONNECTING
    CONNECTING   --CONNECTED frame----------> CONNECTED  (subscribe once)
    CONNECTING   --error / timeout----------> DISCONNECTED
    CONNECTED    --error / close / ERROR----> DISCONNECTED

Every entry into DISCONNECTED, other than construction and ``stop()``,
schedules exactly one reconnect attempt ``RECONNECT_DELAY`` seconds
later.  There is no backoff growth and no attempt cap.

Only the first failure of an outage is logged at WARNING; the retries
that follow go to INFO until a session is established again.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from urllib.parse import urlparse

from src.config.settings import Settings
from src.models.notification import CatalogUpdate, parse_notification
from src.services.scheduling import Scheduler, TimerHandle
from src.services.stomp import (
    StompError,
    StompFrame,
    connect_frame,
    decode_frame,
    disconnect_frame,
    split_frames,
    subscribe_frame,
)
from src.services.transport import CurlWebSocketTransport, WebSocketTransport
from src.ui.renderer import Renderer

logger = logging.getLogger("catalog_sync.live")


class ConnectionState(Enum):
    """Lifecycle of the push connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class ChannelError(ConnectionError):
    """The broker rejected the session or sent an ERROR frame."""


class LiveUpdateChannel:
    """Keeps the catalog subscription alive and renders pushed lists.

    The channel only ever renders data it already received; it never
    triggers a pull query.
    """

    def __init__(
        self,
        renderer: Renderer,
        scheduler: Scheduler,
        transport_factory: Callable[[], WebSocketTransport] | None = None,
        reconnect_delay: float | None = None,
        topic: str | None = None,
        on_state_change: Callable[[ConnectionState], None] | None = None,
    ) -> None:
        self.settings = Settings()
        self.renderer = renderer
        self.scheduler = scheduler
        self.transport_factory: Callable[[], WebSocketTransport] = (
            transport_factory or CurlWebSocketTransport
        )
        self.reconnect_delay: float = (
            self.settings.RECONNECT_DELAY
            if reconnect_delay is None
            else reconnect_delay
        )
        self.topic = topic or self.settings.TOPIC
        self.on_state_change = on_state_change

        self.state = ConnectionState.DISCONNECTED
        self.attempts: int = 0
        self.reconnects_scheduled: int = 0
        self.updates_rendered: int = 0
        self.failure_streak: int = 0
        self._stopped: bool = False
        self._reconnect_handle: TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None
        self._transport: WebSocketTransport | None = None

    # ── Public API ───────────────────────────────────────

    @property
    def task(self) -> "asyncio.Task[None] | None":
        """The current connection attempt, if one is running."""
        return self._task

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_handle is not None

    def start(self) -> None:
        """Begin connecting; a no-op unless DISCONNECTED and idle."""
        if self.state is not ConnectionState.DISCONNECTED:
            return
        if self._reconnect_handle is not None:
            return
        self._stopped = False
        self._begin_connect()

    async def stop(self) -> None:
        """Tear the channel down for good; no reconnect follows."""
        self._stopped = True
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

        transport = self._transport
        if (
            transport is not None
            and self.state is ConnectionState.CONNECTED
        ):
            try:
                await transport.send(disconnect_frame().encode())
            except Exception as exc:
                logger.debug("DISCONNECT not delivered: %s", exc)

        task = self._task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._task = None
        self._set_state(ConnectionState.DISCONNECTED)

    # ── Connection lifecycle ─────────────────────────────

    def _begin_connect(self) -> None:
        self._reconnect_handle = None
        self.attempts += 1
        self._set_state(ConnectionState.CONNECTING)
        self._task = asyncio.ensure_future(self._run())

    async def _run(self) -> None:
        transport: WebSocketTransport | None = None
        try:
            transport = self.transport_factory()
            self._transport = transport
            await transport.connect()
            await transport.send(connect_frame(self._host()).encode())
            await asyncio.wait_for(
                self._await_connected(transport),
                timeout=self.settings.HANDSHAKE_TIMEOUT,
            )
            self.failure_streak = 0
            self._set_state(ConnectionState.CONNECTED)
            await transport.send(subscribe_frame(self.topic).encode())
            logger.info(
                "Connected to live updates, subscribed to %s", self.topic
            )
            while True:
                data = await transport.recv()
                for frame in self._decode(data):
                    self._handle_frame(frame)
        except asyncio.CancelledError:
            await self._close_transport(transport)
            raise
        except Exception as exc:
            self._log_failure(exc)
        await self._close_transport(transport)
        self._on_disconnected()

    async def _await_connected(self, transport: WebSocketTransport) -> None:
        """Read frames until the broker acknowledges the session."""
        while True:
            data = await transport.recv()
            for frame in self._decode(data):
                if frame.command == "CONNECTED":
                    logger.debug(
                        "STOMP session open (version %s)",
                        frame.headers.get("version", "?"),
                    )
                    return
                if frame.command == "ERROR":
                    raise ChannelError(
                        frame.headers.get("message") or frame.body
                    )

    def _decode(self, data: str) -> list[StompFrame]:
        """Decode inbound text, dropping frames that do not parse."""
        frames: list[StompFrame] = []
        for chunk in split_frames(data):
            try:
                frames.append(decode_frame(chunk))
            except StompError as exc:
                logger.debug("Skipping malformed frame: %s", exc)
        return frames

    def _handle_frame(self, frame: StompFrame) -> None:
        if frame.command == "ERROR":
            raise ChannelError(frame.headers.get("message") or frame.body)
        if frame.command != "MESSAGE":
            return
        destination = frame.headers.get("destination")
        if destination is not None and destination != self.topic:
            logger.debug("Ignoring message for %s", destination)
            return

        notification = parse_notification(frame.body)
        if isinstance(notification, CatalogUpdate) and notification.is_actionable:
            logger.info(
                "Catalog update pushed with %d products",
                len(notification.products),
            )
            self.updates_rendered += 1
            self.renderer.render(list(notification.products))
            return
        logger.debug("Ignoring notification: %s", notification)

    def _on_disconnected(self) -> None:
        self._task = None
        self._set_state(ConnectionState.DISCONNECTED)
        if self._stopped or self._reconnect_handle is not None:
            return
        self._reconnect_handle = self.scheduler.call_later(
            self.reconnect_delay, self._reconnect
        )
        self.reconnects_scheduled += 1

    def _reconnect(self) -> None:
        self._reconnect_handle = None
        if self._stopped or self.state is not ConnectionState.DISCONNECTED:
            return
        logger.info("Reconnecting to live updates (attempt %d)", self.attempts + 1)
        self._begin_connect()

    def _log_failure(self, exc: Exception) -> None:
        self.failure_streak += 1
        if self.failure_streak == 1:
            logger.warning(
                "Live update channel error, reconnecting in %.0f seconds: %s",
                self.reconnect_delay,
                exc,
            )
            logger.debug("Live channel failure detail", exc_info=exc)
            return
        logger.info(
            "Live update channel still down (failure %d), retrying in %.0f seconds: %s",
            self.failure_streak,
            self.reconnect_delay,
            exc,
        )

    async def _close_transport(
        self, transport: WebSocketTransport | None
    ) -> None:
        if transport is None:
            return
        if self._transport is transport:
            self._transport = None
        try:
            await transport.close()
        except Exception as exc:
            logger.debug("Error closing transport: %s", exc)

    # ── Helpers ──────────────────────────────────────────

    def _host(self) -> str:
        return urlparse(self.settings.BASE_URL).hostname or "localhost"

    def _set_state(self, state: ConnectionState) -> None:
        if state is self.state:
            return
        logger.debug("Live channel %s -> %s", self.state.value, state.value)
        self.state = state
        if self.on_state_change is not None:
            self.on_state_change(state)
