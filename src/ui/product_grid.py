# src/ui/product_grid.py

"""Textual widget that draws a :data:`GridView`."""

from typing import cast

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Static

from src.ui.renderer import GridView, Placeholder, ProductCard

COLUMNS = ("Fav", "Name", "Category", "Stock", "Price (S/)", "Order")


class ProductGrid(Container):
    """Product table plus the placeholder shown instead of it."""

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self.cards: tuple[ProductCard, ...] = ()

    def compose(self) -> ComposeResult:
        yield cast(
            DataTable[str | Text],
            DataTable(
                id="grid_table",
                zebra_stripes=True,
                cursor_type="row",
            ),
        )
        yield Static("Loading products...", id="grid_placeholder")

    def on_mount(self) -> None:
        self._table().add_columns(*COLUMNS)
        self._table().display = False

    def show(self, view: GridView) -> None:
        """Replace whatever is on screen with *view*."""
        table = self._table()
        placeholder = self.query_one("#grid_placeholder", Static)
        table.clear()

        if isinstance(view, Placeholder):
            self.cards = ()
            table.display = False
            placeholder.display = True
            placeholder.set_class(view.kind == "error", "error")
            placeholder.update(
                Text.assemble(
                    (view.title, "bold"),
                    "\n",
                    (view.message, "dim"),
                )
            )
            return

        self.cards = view
        placeholder.display = False
        placeholder.remove_class("error")
        table.display = True
        for card in view:
            table.add_row(*self._row(card))

    @staticmethod
    def _row(card: ProductCard) -> tuple[str | Text, ...]:
        if card.order_enabled:
            order = Text(f"Add (1-{card.quantity_max})", style="bold blue")
        else:
            order = Text("Sold out", style="dim strike")
        return (
            Text(card.favorite_icon, style=card.favorite_style),
            Text(card.name, style="dim" if card.is_sold_out else ""),
            card.category,
            str(card.stock),
            card.price_label,
            order,
        )

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#grid_table", DataTable),
        )
