# src/services/catalog_client.py

"""REST client for the product search endpoint."""

import logging
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.product import Product, parse_products
from src.models.query import SearchQuery

logger = logging.getLogger("catalog_sync.client")


class CatalogQueryError(Exception):
    """A pull query failed: transport error, bad status or bad body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CatalogClient:
    """Blocking search client; callers run it in a worker thread.

    A single attempt per query: retrying is left to the user changing
    their input or pressing refresh.
    """

    def __init__(self, base_url: str | None = None) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.BASE_URL).rstrip("/")
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{self.settings.SEARCH_PATH}"

    def search(self, query: SearchQuery) -> list[Product]:
        """Run *query* and return the decoded product list.

        Raises :class:`CatalogQueryError` on any failure.
        """
        params = query.to_params()
        try:
            resp = self.session.get(
                self.search_url,
                params=params,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            raise CatalogQueryError(
                f"Request to {self.search_url} failed: {exc}"
            ) from exc

        if resp.status_code != 200:
            raise CatalogQueryError(
                f"Search returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            payload: Any = resp.json()
            products = parse_products(payload)
        except ValueError as exc:
            raise CatalogQueryError(
                f"Unreadable search response: {exc}",
                status_code=resp.status_code,
            ) from exc

        logger.info(
            "Search %s returned %d products", params or "{}", len(products)
        )
        return products

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()
