# src/cli/runner.py

"""Headless one-shot search, rendered through the same view builder."""

import asyncio
import json
import logging
import sys

from rich.console import Console
from rich.table import Table
from rich.text import Text

from src.models.favorites import FavoritesSet
from src.models.query import SearchQuery
from src.services.catalog_client import CatalogClient, CatalogQueryError
from src.ui.renderer import GridView, Placeholder, build_view

logger = logging.getLogger("catalog_sync.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _view_to_dicts(view: GridView) -> list[dict[str, object]]:
    """Serialise rendered cards to plain dicts for JSON output."""
    if isinstance(view, Placeholder):
        return []
    return [
        {
            "id": card.product_id,
            "name": card.name,
            "category": card.category,
            "stock": card.stock,
            "price": card.price_label,
            "imageUrl": card.image_url,
            "favorite": card.is_favorite,
            "soldOut": card.is_sold_out,
            "orderEnabled": card.order_enabled,
        }
        for card in view
    ]


def _print_table(view: GridView) -> None:
    """Render a Rich table of the view to stdout."""
    if isinstance(view, Placeholder):
        Console().print(f"[bold]{view.title}[/bold]\n[dim]{view.message}[/dim]")
        return

    table = Table(
        title="Catalog",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Fav", justify="center", width=3)
    table.add_column("ID", style="dim")
    table.add_column("Name", max_width=50)
    table.add_column("Category", style="magenta")
    table.add_column("Stock", justify="right")
    table.add_column("Price (S/)", justify="right", style="green")
    table.add_column("Order", justify="center")

    for card in view:
        table.add_row(
            Text(card.favorite_icon, style=card.favorite_style),
            card.product_id,
            card.name,
            card.category,
            str(card.stock),
            card.price_label,
            "[dim]sold out[/dim]" if card.is_sold_out else "available",
        )

    Console().print(table)


async def cli_search(
    term: str | None,
    category: str | None,
    output_format: str,
    favorites: FavoritesSet,
    base_url: str | None = None,
) -> int:
    """Run a single query and return an exit code (0=ok, 1=fail)."""
    query = SearchQuery(term=term, category=category)
    client = CatalogClient(base_url=base_url)
    _err.print(
        f"[bold]Searching:[/bold] {query.to_params() or 'all products'}  "
        f"[dim]{client.search_url}[/dim]"
    )

    try:
        products = await asyncio.to_thread(client.search, query)
    except CatalogQueryError as exc:
        logger.error("Headless search failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error loading products: {exc}[/red]")
        return 1
    finally:
        client.close()

    view = build_view(products, favorites)
    if not products:
        _err.print("[yellow]No products found.[/yellow]")
    else:
        sold_out = sum(1 for p in products if p.is_sold_out)
        _err.print(
            f"[green]✓ {len(products)} products"
            f" ({sold_out} sold out)[/green]"
        )

    if output_format == "table":
        _print_table(view)
    else:
        json.dump(
            _view_to_dicts(view),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0
