# tests/test_cli_runner.py

"""Tests for the headless one-shot search."""

import io
import json
import unittest
from unittest.mock import MagicMock, patch

from fakes import make_product

from src.cli.runner import cli_search
from src.models.favorites import FavoritesSet
from src.services.catalog_client import CatalogQueryError

CLIENT_PATH = "src.cli.runner.CatalogClient"


def _mock_client(products: list[object] | None = None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    client.search_url = "http://shop.test/api/v1/productos/search"
    if error is not None:
        client.search.side_effect = error
    else:
        client.search.return_value = products or []
    return client


class TestCliSearch(unittest.IsolatedAsyncioTestCase):
    """cli_search exit codes and output."""

    async def test_json_output(self) -> None:
        """JSON output lists rendered cards with their flags."""
        client = _mock_client([make_product("7", name="Milk", stock=0, price=3.5)])
        stdout = io.StringIO()
        with patch(CLIENT_PATH, return_value=client), patch("sys.stdout", stdout):
            code = await cli_search(
                term="milk",
                category=None,
                output_format="json",
                favorites=FavoritesSet.from_ids([7]),
            )
        self.assertEqual(code, 0)
        rows = json.loads(stdout.getvalue())
        self.assertEqual(rows[0]["price"], "3.50")
        self.assertTrue(rows[0]["favorite"])
        self.assertFalse(rows[0]["orderEnabled"])
        client.close.assert_called_once()

    async def test_table_output(self) -> None:
        """Table output goes through rich without error."""
        client = _mock_client([make_product("1")])
        with patch(CLIENT_PATH, return_value=client), patch(
            "src.cli.runner.Console"
        ) as mock_console:
            code = await cli_search(
                term=None,
                category="General",
                output_format="table",
                favorites=FavoritesSet(),
            )
        self.assertEqual(code, 0)
        mock_console.return_value.print.assert_called_once()

    async def test_empty_result_is_success(self) -> None:
        """No products still exits 0 with an empty list."""
        stdout = io.StringIO()
        with patch(CLIENT_PATH, return_value=_mock_client([])), patch(
            "sys.stdout", stdout
        ):
            code = await cli_search(
                term="zzz",
                category=None,
                output_format="json",
                favorites=FavoritesSet(),
            )
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(stdout.getvalue()), [])

    async def test_failure_exit_code(self) -> None:
        """A failed query exits 1 and closes the client."""
        client = _mock_client(error=CatalogQueryError("HTTP 500", 500))
        with patch(CLIENT_PATH, return_value=client), self.assertLogs(
            "catalog_sync.cli", level="ERROR"
        ):
            code = await cli_search(
                term="milk",
                category=None,
                output_format="json",
                favorites=FavoritesSet(),
            )
        self.assertEqual(code, 1)
        client.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
