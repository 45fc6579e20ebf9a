# src/config/settings.py

"""Central configuration for the catalog_sync client."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _csv_env(name: str) -> list[str]:
    """Split a comma-separated environment variable into clean items."""
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """Central configuration for the catalog_sync client."""

    # --- Server ---
    BASE_URL: str = os.getenv(
        "CATALOG_BASE_URL", "http://localhost:8080"
    ).rstrip("/")
    SEARCH_PATH: str = "/api/v1/productos/search"
    WS_PATH: str = "/ws"
    WS_TRANSPORT_SUFFIX: str = "/websocket"  # SockJS raw WebSocket transport
    TOPIC: str = "/topic/productos"

    # --- Pull channel ---
    SEARCH_DEBOUNCE: float = 0.3        # Quiet period before a typed query fires
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out

    # --- Push channel ---
    RECONNECT_DELAY: float = 5.0        # Fixed delay, no backoff, no cap
    HANDSHAKE_TIMEOUT: float = 10.0     # Seconds to wait for CONNECTED

    # --- Page data ---
    FAVORITES_IDS: str = os.getenv("CATALOG_FAVORITES_IDS", "[]")
    CATEGORIES: list[str] = _csv_env("CATALOG_CATEGORIES")
    DEFAULT_IMAGE_URL: str = (
        "/Admin/dist/assets/img/productos/default-product.png"
    )

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "es-PE,es;q=0.9,en;q=0.8",
        "sec-fetch-dest": "empty",
        "sec-fetch-mode": "cors",
        "sec-fetch-site": "same-origin",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    @classmethod
    def search_url(cls) -> str:
        """Absolute URL of the product search endpoint."""
        return f"{cls.BASE_URL}{cls.SEARCH_PATH}"

    @classmethod
    def ws_url(cls) -> str:
        """Absolute WebSocket URL of the STOMP endpoint."""
        if cls.BASE_URL.startswith("https://"):
            origin = "wss://" + cls.BASE_URL[len("https://"):]
        elif cls.BASE_URL.startswith("http://"):
            origin = "ws://" + cls.BASE_URL[len("http://"):]
        else:
            origin = cls.BASE_URL
        return f"{origin}{cls.WS_PATH}{cls.WS_TRANSPORT_SUFFIX}"
