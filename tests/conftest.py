# tests/conftest.py

"""Shared pytest fixtures for all catalog_sync tests."""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def no_live_socket() -> Generator[None, None, None]:
    """Make real WebSocket sessions fail so no test touches the network."""
    session = MagicMock()
    session.ws_connect = AsyncMock(
        side_effect=ConnectionError("network disabled in tests")
    )
    session.close = AsyncMock()
    with patch(
        "src.services.transport.AsyncSession", return_value=session
    ):
        yield
