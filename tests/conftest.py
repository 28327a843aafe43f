"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

# Settings are read once at import; keep tests off the real scheduler and API
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("TIINGO_API_KEY", "")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from fastapi.testclient import TestClient

from folio.domain import Category, Holding, PriceQuote


@pytest.fixture(autouse=True)
def reset_database_globals():
    """Make sure no test reuses an engine bound to another event loop."""
    import folio.database.connection as db_conn

    db_conn._engine = None
    db_conn._session_factory = None
    yield
    db_conn._engine = None
    db_conn._session_factory = None


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from folio.api.app import create_api_app

    app = create_api_app()
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def tiingo_key(monkeypatch) -> str:
    """Configure a Tiingo API key for the duration of a test."""
    from folio.core.config import settings

    monkeypatch.setattr(settings, "tiingo_api_key", "test-token")
    return "test-token"


@pytest.fixture
def no_tiingo_key(monkeypatch) -> None:
    from folio.core.config import settings

    monkeypatch.setattr(settings, "tiingo_api_key", "")


@pytest.fixture
def holding_factory():
    """Build Holding snapshots with sensible defaults."""

    def _make(
        ticker: str = "AAPL",
        quantity: float = 10,
        purchase_price: float = 100,
        target: float = 0,
        category: Category = Category.CORE,
        id: int | None = 1,
        company_name: str | None = None,
    ) -> Holding:
        return Holding(
            id=id,
            ticker=ticker,
            quantity=quantity,
            purchase_price=purchase_price,
            target_allocation_percent=target,
            category=category,
            company_name=company_name,
            acquired_at=datetime(2024, 1, 2, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def quote_factory():
    def _make(ticker: str, price: float) -> PriceQuote:
        return PriceQuote(
            ticker=ticker,
            price=price,
            last_updated=datetime(2024, 6, 1, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def sample_holdings(holding_factory) -> list[Holding]:
    """A two-position portfolio: 10 A at 100 and 5 B at 200."""
    return [
        holding_factory("A", 10, 100, target=50, category=Category.CORE, id=1),
        holding_factory("B", 5, 200, target=50, category=Category.SATELLITE, id=2),
    ]


@pytest.fixture
def sample_prices(quote_factory) -> dict[str, PriceQuote]:
    """A up to 110, B down to 190."""
    return {"A": quote_factory("A", 110), "B": quote_factory("B", 190)}


@pytest.fixture
def mock_session():
    """AsyncMock session usable as ``async with get_session() as session``."""
    session = AsyncMock()
    session.add = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)
    return session
