# main.py

"""Entry point for the catalog_sync client (TUI or headless search)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.models.favorites import FavoritesSet

logger = logging.getLogger("catalog_sync.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="catalog_sync",
        description="Live product catalog kept in sync with the store server.",
        epilog=f"Default server: {Settings.BASE_URL}",
    )
    parser.add_argument(
        "-s",
        "--search",
        default=None,
        dest="term",
        help="Run one headless search for TERM instead of the TUI.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Category filter for the headless search.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Headless output format (default: json).",
    )
    parser.add_argument(
        "--favorites",
        default=None,
        help="JSON array of favorite product ids (overrides CATALOG_FAVORITES_IDS).",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        dest="base_url",
        help="Server base URL (overrides CATALOG_BASE_URL).",
    )
    return parser


def _run_tui(favorites: FavoritesSet) -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import CatalogApp

    try:
        app = CatalogApp(favorites=favorites)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("catalog_sync TUI shutting down")


def _run_cli(args: argparse.Namespace, favorites: FavoritesSet) -> None:
    """Run a headless search and exit."""
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            term=args.term,
            category=args.category,
            output_format=args.output_format,
            favorites=favorites,
            base_url=args.base_url,
        )
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to the TUI (default) or a headless search."""
    parser = _build_parser()
    args = parser.parse_args()
    headless = args.term is not None or args.category is not None

    log_file = setup_logging(console=headless)
    logger.info("catalog_sync starting, log file: %s", log_file)

    if args.base_url:
        Settings.BASE_URL = args.base_url.rstrip("/")

    favorites = FavoritesSet.from_embedded(
        args.favorites if args.favorites is not None
        else Settings.FAVORITES_IDS
    )

    if headless:
        _run_cli(args, favorites)
    else:
        _run_tui(favorites)


if __name__ == "__main__":
    main()
