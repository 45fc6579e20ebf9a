# src/ui/app.py

"""Terminal UI for the live product catalog."""

import asyncio
import logging
from collections.abc import Callable

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import Footer, Header, Input, Select, Static

from src.config.settings import Settings
from src.models.favorites import FavoritesSet
from src.services.bootstrap import CatalogSession
from src.services.catalog_client import CatalogClient
from src.services.live_channel import ConnectionState
from src.services.transport import WebSocketTransport
from src.ui.product_grid import ProductGrid
from src.ui.renderer import GridView

logger = logging.getLogger("catalog_sync.ui")

_STATUS_LABELS: dict[ConnectionState, str] = {
    ConnectionState.DISCONNECTED: "🔴 Live updates offline, retrying",
    ConnectionState.CONNECTING: "🟡 Connecting to live updates...",
    ConnectionState.CONNECTED: "🟢 Live updates on",
}


class CatalogApp(App[object]):
    """Product catalog kept in sync by search queries and pushed updates."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
    ]

    def __init__(
        self,
        favorites: FavoritesSet | None = None,
        client: CatalogClient | None = None,
        transport_factory: Callable[[], WebSocketTransport] | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.favorites = favorites or FavoritesSet.from_embedded(
            self.settings.FAVORITES_IDS
        )
        self._client = client
        self._transport_factory = transport_factory
        self.categories: set[str] = set(self.settings.CATEGORIES)
        self._pending_categories: set[str] = set()
        self.session: CatalogSession | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("🛒 Product Catalog", id="title"),
            Horizontal(
                Input(placeholder="Search products...", id="search_box"),
                Select[str](
                    self._category_options(),
                    prompt="All categories",
                    id="category_filter",
                ),
                id="search_bar",
            ),
            Static(_STATUS_LABELS[ConnectionState.CONNECTING], id="status"),
            ProductGrid(id="product_grid"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Wire the session and load the first page of products."""
        self.session = CatalogSession.create(
            favorites=self.favorites,
            sink=self.show_view,
            scheduler=asyncio.get_running_loop(),
            client=self._client,
            transport_factory=self._transport_factory,
            on_state_change=self._show_connection_state,
        )
        self.session.start()

    async def on_unmount(self) -> None:
        if self.session is not None:
            # Widgets are going away; stop mirroring the channel state
            self.session.channel.on_state_change = None
            await self.session.stop()

    # ── Input events ─────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        """Every keystroke restarts the search debounce."""
        if event.input.id == "search_box" and self.session is not None:
            self.session.controller.on_input_changed(event.value)

    def on_select_changed(self, event: Select.Changed) -> None:
        """Category changes query immediately."""
        if event.select.id != "category_filter" or self.session is None:
            return
        category = event.value if isinstance(event.value, str) else ""
        if category == self.session.controller.category:
            return
        self.session.controller.on_category_changed(category)
        if not category:
            self._apply_pending_categories()

    def action_refresh(self) -> None:
        """Re-run the current query."""
        if self.session is not None:
            self.session.controller.refresh()

    # ── Rendering ────────────────────────────────────────

    def show_view(self, view: GridView) -> None:
        """Sink for the renderer: draw the view and learn categories."""
        self.query_one("#product_grid", ProductGrid).show(view)
        if isinstance(view, tuple):
            self._remember_categories(
                {card.category for card in view if card.category}
            )

    def _show_connection_state(self, state: ConnectionState) -> None:
        self.query_one("#status", Static).update(_STATUS_LABELS[state])
        if state is ConnectionState.DISCONNECTED:
            logger.debug("Status bar shows live updates offline")

    # ── Category options ─────────────────────────────────

    def _category_options(self) -> list[tuple[str, str]]:
        return [(name, name) for name in sorted(self.categories)]

    def _remember_categories(self, seen: set[str]) -> None:
        new = seen - self.categories
        if not new:
            return
        self._pending_categories |= new
        # Replacing options resets the selection, so wait for "all"
        if self.session is None or not self.session.controller.category:
            self._apply_pending_categories()

    def _apply_pending_categories(self) -> None:
        if not self._pending_categories:
            return
        self.categories |= self._pending_categories
        self._pending_categories.clear()
        select = self.query_one("#category_filter", Select)
        select.set_options(self._category_options())
