# src/ui/renderer.py

"""Pure view building for the product grid.

Both the pull path (search results) and the push path (catalog
updates) converge here.  ``build_view`` turns a product list into an
immutable view tree; ``Renderer`` hands that tree to whatever sink
draws it (the Textual grid in the app, a list in tests).
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from src.config.settings import Settings
from src.models.favorites import FavoritesSet
from src.models.product import Product

logger = logging.getLogger("catalog_sync.renderer")

EMPTY_TITLE = "No products found"
EMPTY_MESSAGE = "Try other search criteria or check all categories."
ERROR_TITLE = "Error loading products"


@dataclass(frozen=True)
class ProductCard:
    """Presentation of a single product."""

    product_id: str
    name: str
    category: str
    stock: int
    price_label: str
    image_url: str
    is_favorite: bool
    is_sold_out: bool

    @property
    def order_enabled(self) -> bool:
        """Quantity input and order button are disabled when sold out."""
        return not self.is_sold_out

    @property
    def quantity_max(self) -> int:
        return self.stock

    @property
    def favorite_icon(self) -> str:
        return "♥" if self.is_favorite else "♡"

    @property
    def favorite_style(self) -> str:
        return "bold red" if self.is_favorite else "red"

    @property
    def favorite_title(self) -> str:
        return (
            "Remove from favorites"
            if self.is_favorite
            else "Add to favorites"
        )


@dataclass(frozen=True)
class Placeholder:
    """Informational message shown instead of the grid."""

    kind: str  # "empty" or "error"
    title: str
    message: str = ""


GridView = tuple[ProductCard, ...] | Placeholder


def format_price(price: float) -> str:
    """Two-decimal price label, e.g. ``3.5`` -> ``"3.50"``."""
    return f"{price:.2f}"


def build_card(product: Product, favorites: FavoritesSet) -> ProductCard:
    """Derive presentation flags for one product."""
    return ProductCard(
        product_id=product.id,
        name=product.name,
        category=product.category,
        stock=product.stock,
        price_label=format_price(product.price),
        image_url=product.image_url or Settings.DEFAULT_IMAGE_URL,
        is_favorite=favorites.contains(product.id),
        is_sold_out=product.is_sold_out,
    )


def build_view(
    products: Sequence[Product], favorites: FavoritesSet,
) -> GridView:
    """Build the full grid for *products*; never filters any out."""
    if not products:
        return Placeholder(
            kind="empty", title=EMPTY_TITLE, message=EMPTY_MESSAGE,
        )
    return tuple(build_card(p, favorites) for p in products)


def error_view(message: str) -> Placeholder:
    """Grid replacement shown after a failed query."""
    return Placeholder(kind="error", title=ERROR_TITLE, message=message)


class Renderer:
    """Replaces the visible grid with a freshly built view."""

    def __init__(
        self,
        favorites: FavoritesSet,
        sink: Callable[[GridView], None],
    ) -> None:
        self.favorites = favorites
        self._sink = sink
        self.last_view: GridView | None = None

    def render(self, products: Sequence[Product]) -> None:
        """Render *products*, or the empty placeholder for no products."""
        view = build_view(products, self.favorites)
        logger.debug("Rendering %d products", len(products))
        self._show(view)

    def render_error(self, message: str) -> None:
        """Replace the grid with an error state."""
        self._show(error_view(message))

    def _show(self, view: GridView) -> None:
        self.last_view = view
        self._sink(view)
