# src/models/product.py

"""Product data model shared by the pull and push channels."""

import logging
from dataclasses import dataclass
from typing import Any

from src.models.favorites import normalize_id

logger = logging.getLogger("catalog_sync.models")


@dataclass(frozen=True)
class Product:
    """A single catalog entry as sent by the server."""

    id: str
    name: str
    category: str
    price: float
    stock: int
    image_url: str = ""

    @property
    def is_sold_out(self) -> bool:
        """Sold-out products stay visible but cannot be ordered."""
        return self.stock == 0

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Product":
        """Build a Product from the wire shape used by the REST and push APIs.

        Raises ``KeyError``, ``TypeError`` or ``ValueError`` when a required
        field is missing or out of range.
        """
        price = payload["precio"]
        stock = payload["stock"]
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise TypeError(f"precio must be numeric, got {price!r}")
        if isinstance(stock, bool) or not isinstance(stock, (int, float)):
            raise TypeError(f"stock must be numeric, got {stock!r}")
        if price < 0:
            raise ValueError(f"precio must be non-negative, got {price}")
        if stock < 0 or int(stock) != stock:
            raise ValueError(
                f"stock must be a non-negative integer, got {stock}"
            )
        return cls(
            id=normalize_id(payload["id"]),
            name=str(payload["name"]),
            category=str(payload.get("categoria") or ""),
            price=float(price),
            stock=int(stock),
            image_url=str(payload.get("imageUrl") or ""),
        )


def parse_products(payload: Any) -> list[Product]:
    """Convert a decoded JSON array into products.

    Malformed entries are dropped and logged instead of failing the
    whole batch.  A payload that is not a list at all raises
    ``ValueError``.
    """
    if not isinstance(payload, list):
        raise ValueError(
            f"Expected a JSON array of products, got {type(payload).__name__}"
        )

    products: list[Product] = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict):
            logger.warning(
                "Skipping product #%d: not an object (%r)", index, entry
            )
            continue
        try:
            products.append(Product.from_api(entry))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "Skipping malformed product #%d (id=%r): %s",
                index,
                entry.get("id"),
                exc,
            )
    return products
