# src/models/favorites.py

"""Read-only favorites context built once from startup-embedded data."""

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger("catalog_sync.favorites")


def normalize_id(value: Any) -> str:
    """Return the canonical string form of a product identifier.

    ``7``, ``7.0``, ``"7"`` and ``" 7 "`` all normalize to ``"7"``.
    Raises ``TypeError`` for values that cannot identify a product.
    """
    if isinstance(value, bool) or value is None:
        raise TypeError(f"Not a product identifier: {value!r}")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise TypeError("Empty product identifier")
        return text
    raise TypeError(f"Not a product identifier: {value!r}")


@dataclass(frozen=True)
class FavoritesSet:
    """Immutable set of favorited product identifiers.

    Favoriting happens through an external form submission, so this
    object exposes no mutation API for the lifetime of the session.
    """

    ids: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_ids(cls, ids: Any) -> "FavoritesSet":
        """Build from an iterable of raw identifiers, skipping bad ones."""
        normalized: set[str] = set()
        for raw in ids:
            try:
                normalized.add(normalize_id(raw))
            except TypeError:
                logger.warning("Ignoring invalid favorite id %r", raw)
        return cls(frozenset(normalized))

    @classmethod
    def from_embedded(cls, raw: str | None) -> "FavoritesSet":
        """Parse the JSON array embedded in the page at startup.

        Absent or malformed data degrades to an empty set.
        """
        if not raw or not raw.strip():
            return cls()
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Unparseable favorites data, using none: %s", exc)
            return cls()
        if not isinstance(decoded, list):
            logger.warning(
                "Favorites data is %s, not a list; using none",
                type(decoded).__name__,
            )
            return cls()
        favorites = cls.from_ids(decoded)
        logger.info("Loaded %d favorite product ids", len(favorites))
        return favorites

    def contains(self, product_id: Any) -> bool:
        """Membership test on the normalized identifier."""
        try:
            return normalize_id(product_id) in self.ids
        except TypeError:
            return False

    def __contains__(self, product_id: object) -> bool:
        return self.contains(product_id)

    def __len__(self) -> int:
        return len(self.ids)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.ids))
