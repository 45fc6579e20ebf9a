# src/models/notification.py

"""Push notification variants received on the catalog topic."""

import json
from dataclasses import dataclass

from src.models.product import Product, parse_products

PRODUCT_UPDATE = "PRODUCT_UPDATE"


@dataclass(frozen=True)
class CatalogUpdate:
    """The authoritative product list changed; carries the full list."""

    products: tuple[Product, ...]

    @property
    def is_actionable(self) -> bool:
        return bool(self.products)


@dataclass(frozen=True)
class IgnoredNotification:
    """Any message this client does not act on."""

    kind: str
    reason: str

    @property
    def is_actionable(self) -> bool:
        return False


PushNotification = CatalogUpdate | IgnoredNotification


def parse_notification(body: str) -> PushNotification:
    """Decode a frame body into a notification.

    Never raises: unrecognised shapes come back as
    :class:`IgnoredNotification`.
    """
    try:
        decoded = json.loads(body)
    except (json.JSONDecodeError, TypeError) as exc:
        return IgnoredNotification(kind="", reason=f"invalid JSON: {exc}")

    if not isinstance(decoded, dict):
        return IgnoredNotification(
            kind="", reason=f"body is {type(decoded).__name__}"
        )

    kind = decoded.get("type")
    if kind != PRODUCT_UPDATE:
        return IgnoredNotification(
            kind=str(kind or ""), reason="unhandled type"
        )

    raw_products = decoded.get("productos")
    if not isinstance(raw_products, list) or not raw_products:
        return IgnoredNotification(kind=kind, reason="no products")

    products = parse_products(raw_products)
    if not products:
        return IgnoredNotification(
            kind=kind, reason="no well-formed products"
        )
    return CatalogUpdate(products=tuple(products))
