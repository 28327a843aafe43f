"""
Tiingo market-data client.

Two endpoints are used:
- daily prices: end-of-day OHLCV bars for a ticker and date range
- ticker metadata: company name and listing details

Tiingo serializes some numeric fields as strings, so bar parsing coerces
every value and substitutes the close for a missing open/high/low.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Optional

import httpx

from folio.core.config import settings
from folio.core.logging import get_logger
from folio.domain import PriceBar

logger = get_logger("services.tiingo")


def _to_float(value: Any, default: float = 0.0) -> float:
    """Finite float from a number or numeric string, else ``default``."""
    if value is None:
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        return default
    return f if math.isfinite(f) else default


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _parse_bar_date(raw: Any, fallback: date) -> date:
    if isinstance(raw, str) and raw:
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    return fallback


def parse_bar(raw: dict[str, Any], trading_date: date) -> PriceBar:
    """Build a PriceBar from one Tiingo daily-price record."""
    close = _to_float(raw.get("close"))
    return PriceBar(
        date=_parse_bar_date(raw.get("date"), trading_date),
        open=_to_float(raw.get("open"), close),
        high=_to_float(raw.get("high"), close),
        low=_to_float(raw.get("low"), close),
        close=close,
        volume=_to_int(raw.get("volume")),
    )


def _client(timeout: Optional[float]) -> httpx.AsyncClient:
    if timeout is None:
        timeout = float(settings.external_api_timeout)
    return httpx.AsyncClient(base_url=settings.tiingo_base_url, timeout=timeout)


async def fetch_eod_bar(
    ticker: str,
    trading_date: date,
    *,
    api_key: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[PriceBar]:
    """
    Fetch the end-of-day bar for ``ticker`` on ``trading_date``.

    Args:
        ticker: Stock ticker symbol
        trading_date: Trading day to fetch
        api_key: Tiingo token
        client: Optional preconfigured client (shared across a batch)

    Returns:
        The first bar returned, or None when Tiingo has no data for that day

    Raises:
        httpx.HTTPStatusError: Tiingo answered with a non-2xx status
        httpx.RequestError: The request could not be completed
    """
    day = trading_date.isoformat()
    params = {"token": api_key, "startDate": day, "endDate": day}
    path = f"/tiingo/daily/{ticker}/prices"

    if client is None:
        async with _client(None) as own_client:
            response = await own_client.get(path, params=params)
    else:
        response = await client.get(path, params=params)

    response.raise_for_status()
    payload = response.json()

    if not isinstance(payload, list) or not payload:
        return None
    return parse_bar(payload[0], trading_date)


async def fetch_metadata(
    ticker: str,
    *,
    api_key: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> dict[str, Any]:
    """
    Fetch ticker metadata (``{"ticker", "name", ...}``).

    Raises:
        httpx.HTTPStatusError: Tiingo answered with a non-2xx status
        httpx.RequestError: The request could not be completed
    """
    path = f"/tiingo/daily/{ticker}"
    params = {"token": api_key}

    if client is None:
        async with _client(timeout) as own_client:
            response = await own_client.get(path, params=params)
    else:
        response = await client.get(path, params=params)

    response.raise_for_status()
    data = response.json()
    return data if isinstance(data, dict) else {}


def open_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    """Client for a batch of Tiingo calls; use as an async context manager."""
    return _client(timeout)
