# src/services/bootstrap.py

"""Wires favorites, renderer, pull and push paths for one session."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.models.favorites import FavoritesSet
from src.services.catalog_client import CatalogClient
from src.services.live_channel import ConnectionState, LiveUpdateChannel
from src.services.scheduling import Scheduler
from src.services.search_controller import SearchController
from src.services.transport import WebSocketTransport
from src.ui.renderer import GridView, Renderer

logger = logging.getLogger("catalog_sync.bootstrap")


@dataclass
class CatalogSession:
    """Everything one catalog view needs, built once at startup.

    The search controller and the live channel share the renderer but
    never reference each other.
    """

    favorites: FavoritesSet
    renderer: Renderer
    client: CatalogClient
    controller: SearchController
    channel: LiveUpdateChannel

    @classmethod
    def create(
        cls,
        favorites: FavoritesSet,
        sink: Callable[[GridView], None],
        scheduler: Scheduler,
        client: CatalogClient | None = None,
        transport_factory: Callable[[], WebSocketTransport] | None = None,
        on_state_change: Callable[[ConnectionState], None] | None = None,
    ) -> "CatalogSession":
        renderer = Renderer(favorites, sink)
        client = client or CatalogClient()
        controller = SearchController(client, renderer, scheduler)
        channel = LiveUpdateChannel(
            renderer,
            scheduler,
            transport_factory=transport_factory,
            on_state_change=on_state_change,
        )
        return cls(
            favorites=favorites,
            renderer=renderer,
            client=client,
            controller=controller,
            channel=channel,
        )

    def start(self) -> None:
        """Load the initial, unfiltered product list and open the push channel."""
        logger.info(
            "Starting catalog session (%d favorites)", len(self.favorites)
        )
        self.controller.trigger()
        self.channel.start()

    async def stop(self) -> None:
        """Tear everything down; nothing reconnects afterwards."""
        self.controller.close()
        await self.channel.stop()
        self.client.close()
        logger.info("Catalog session stopped")
