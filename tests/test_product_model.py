# tests/test_product_model.py

"""Tests for the Product dataclass and wire parsing."""

import unittest

from src.models.product import Product, parse_products


def _payload(**overrides: object) -> dict[str, object]:
    base: dict[str, object] = {
        "id": 7,
        "name": "Milk",
        "categoria": "Dairy",
        "stock": 0,
        "precio": 3.5,
        "imageUrl": "https://example.com/milk.png",
    }
    base.update(overrides)
    return base


class TestProductModel(unittest.TestCase):
    """Product dataclass unit tests."""

    def test_from_api_maps_fields(self) -> None:
        """Wire names map onto the dataclass fields."""
        product = Product.from_api(_payload())
        self.assertEqual(product.id, "7")
        self.assertEqual(product.name, "Milk")
        self.assertEqual(product.category, "Dairy")
        self.assertEqual(product.price, 3.5)
        self.assertEqual(product.stock, 0)
        self.assertEqual(product.image_url, "https://example.com/milk.png")

    def test_optional_fields(self) -> None:
        """Missing image and category default to empty strings."""
        payload = _payload()
        del payload["imageUrl"]
        del payload["categoria"]
        product = Product.from_api(payload)
        self.assertEqual(product.image_url, "")
        self.assertEqual(product.category, "")

    def test_sold_out(self) -> None:
        """is_sold_out iff stock is zero."""
        self.assertTrue(Product.from_api(_payload(stock=0)).is_sold_out)
        self.assertFalse(Product.from_api(_payload(stock=1)).is_sold_out)

    def test_frozen(self) -> None:
        """Products are never mutated client-side."""
        product = Product.from_api(_payload())
        with self.assertRaises(AttributeError):
            product.stock = 3  # type: ignore[misc]

    def test_missing_price_rejected(self) -> None:
        """A product without a price is a contract violation."""
        payload = _payload()
        del payload["precio"]
        with self.assertRaises(KeyError):
            Product.from_api(payload)

    def test_negative_values_rejected(self) -> None:
        """Price and stock must be non-negative."""
        with self.assertRaises(ValueError):
            Product.from_api(_payload(precio=-1))
        with self.assertRaises(ValueError):
            Product.from_api(_payload(stock=-2))

    def test_non_numeric_rejected(self) -> None:
        """Strings and booleans are not prices."""
        with self.assertRaises(TypeError):
            Product.from_api(_payload(precio="3.50"))
        with self.assertRaises(TypeError):
            Product.from_api(_payload(stock=True))


class TestParseProducts(unittest.TestCase):
    """Batch parsing with malformed-entry skipping."""

    def test_parses_list(self) -> None:
        """Every well-formed entry is kept, in order."""
        products = parse_products([_payload(id=1), _payload(id=2)])
        self.assertEqual([p.id for p in products], ["1", "2"])

    def test_skips_malformed_entries(self) -> None:
        """Bad entries are logged and dropped."""
        bad = _payload(id=3)
        del bad["precio"]
        with self.assertLogs("catalog_sync.models", level="WARNING"):
            products = parse_products([_payload(id=1), bad, "junk"])
        self.assertEqual([p.id for p in products], ["1"])

    def test_non_list_raises(self) -> None:
        """The payload itself must be a list."""
        with self.assertRaises(ValueError):
            parse_products({"productos": []})

    def test_empty_list(self) -> None:
        """An empty array is a valid empty result."""
        self.assertEqual(parse_products([]), [])


if __name__ == "__main__":
    unittest.main()
