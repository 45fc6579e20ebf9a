# tests/test_catalog_client.py

"""Tests for the REST search client."""

import json
import unittest
from unittest.mock import MagicMock

from src.config.settings import Settings
from src.models.query import SearchQuery
from src.services.catalog_client import CatalogClient, CatalogQueryError


def _response(status: int, payload: object) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = json.dumps(payload)
    resp.json.side_effect = lambda: json.loads(resp.text)
    return resp


class TestCatalogClient(unittest.TestCase):
    """CatalogClient.search with a mocked session."""

    def setUp(self) -> None:
        self.client = CatalogClient(base_url="http://shop.test/")
        self.client.session = MagicMock()

    def tearDown(self) -> None:
        self.client.close()

    def test_search_url(self) -> None:
        """Trailing slashes on the base URL are dropped."""
        self.assertEqual(
            self.client.search_url,
            "http://shop.test/api/v1/productos/search",
        )

    def test_sends_only_non_empty_params(self) -> None:
        """Blank fields are omitted from the query string."""
        self.client.session.get.return_value = _response(200, [])
        self.client.search(SearchQuery(term="milk", category=""))
        _, kwargs = self.client.session.get.call_args
        self.assertEqual(kwargs["params"], {"name": "milk"})
        self.assertEqual(kwargs["timeout"], Settings.REQUEST_TIMEOUT)

    def test_returns_products(self) -> None:
        """A 200 JSON array becomes products."""
        self.client.session.get.return_value = _response(
            200,
            [{"id": 7, "name": "Milk", "categoria": "Dairy", "stock": 0, "precio": 3.5}],
        )
        products = self.client.search(SearchQuery(term="milk"))
        self.assertEqual(len(products), 1)
        self.assertEqual(products[0].id, "7")
        self.assertTrue(products[0].is_sold_out)

    def test_http_error_raises(self) -> None:
        """Non-200 statuses are failures."""
        self.client.session.get.return_value = _response(503, {"error": "x"})
        with self.assertRaises(CatalogQueryError) as ctx:
            self.client.search(SearchQuery())
        self.assertEqual(ctx.exception.status_code, 503)

    def test_transport_error_raises(self) -> None:
        """Network exceptions are wrapped."""
        self.client.session.get.side_effect = ConnectionError("refused")
        with self.assertRaises(CatalogQueryError) as ctx:
            self.client.search(SearchQuery())
        self.assertIsNone(ctx.exception.status_code)
        self.assertIsInstance(ctx.exception.__cause__, ConnectionError)

    def test_bad_body_raises(self) -> None:
        """Unparseable or non-list bodies are failures."""
        resp = _response(200, [])
        resp.text = "<html>login</html>"
        self.client.session.get.return_value = resp
        with self.assertRaises(CatalogQueryError):
            self.client.search(SearchQuery())

        self.client.session.get.return_value = _response(200, {"productos": []})
        with self.assertRaises(CatalogQueryError):
            self.client.search(SearchQuery())

    def test_single_attempt(self) -> None:
        """The client never retries on its own."""
        self.client.session.get.return_value = _response(500, {})
        with self.assertRaises(CatalogQueryError):
            self.client.search(SearchQuery())
        self.assertEqual(self.client.session.get.call_count, 1)


if __name__ == "__main__":
    unittest.main()
