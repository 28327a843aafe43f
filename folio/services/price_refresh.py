"""
Batch refresh of stored prices from Tiingo end-of-day bars.

Each ticker is handled on its own: a failure is recorded in the result's
error list and the batch moves on. There is no retry; a failed ticker is
picked up again by the next run.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError

from folio.core.config import settings
from folio.core.exceptions import ExternalServiceError
from folio.core.logging import get_logger
from folio.repositories import holdings_orm as holdings_repo
from folio.repositories import prices_orm as prices_repo
from folio.services import tiingo

logger = get_logger("services.price_refresh")

NO_DATA_ERROR = "No EOD data returned"
REQUEST_FAILED_ERROR = "Request failed"


@dataclass
class TickerError:
    ticker: str
    error: str

    def to_dict(self) -> dict:
        return {"ticker": self.ticker, "error": self.error}


@dataclass
class RefreshResult:
    """Outcome of one refresh batch."""

    trading_date: date | None = None
    updated: list[str] = field(default_factory=list)
    errors: list[TickerError] = field(default_factory=list)
    message: str = "Success"

    @property
    def summary(self) -> str:
        return f"{len(self.updated)} updated, {len(self.errors)} errors"


def default_trading_date(today: Optional[date] = None) -> date:
    """Yesterday: the latest US session whose EOD bar is published by the morning run."""
    return (today or date.today()) - timedelta(days=1)


def _require_api_key() -> str:
    api_key = settings.tiingo_api_key
    if not api_key:
        logger.error("Tiingo API key not configured")
        raise ExternalServiceError(message="Tiingo API key not configured")
    return api_key


async def update_prices_for_tickers(
    tickers: Iterable[str],
    *,
    api_key: str,
    as_of: Optional[date] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> RefreshResult:
    """
    Fetch the EOD bar of every ticker and upsert it into the price store.

    Args:
        tickers: Tickers to refresh (duplicates are fetched once)
        api_key: Tiingo token
        as_of: Trading date to fetch, defaults to yesterday
        client: Optional shared HTTP client

    Returns:
        RefreshResult listing updated tickers and per-ticker errors
    """
    trading_date = as_of or default_trading_date()
    result = RefreshResult(trading_date=trading_date)
    symbols = sorted({t.strip().upper() for t in tickers if t and t.strip()})

    if client is None:
        async with tiingo.open_client() as own_client:
            await _refresh_each(symbols, trading_date, api_key, own_client, result)
    else:
        await _refresh_each(symbols, trading_date, api_key, client, result)

    logger.info(
        f"Tiingo update completed: {len(result.updated)} success, {len(result.errors)} errors",
        extra={"trading_date": trading_date.isoformat(), "failed": [e.ticker for e in result.errors]},
    )
    return result


async def _refresh_each(
    symbols: list[str],
    trading_date: date,
    api_key: str,
    client: httpx.AsyncClient,
    result: RefreshResult,
) -> None:
    for ticker in symbols:
        error = await _refresh_one(ticker, trading_date, api_key, client)
        if error is None:
            result.updated.append(ticker)
        else:
            logger.warning(f"Price update failed for {ticker}: {error}")
            result.errors.append(TickerError(ticker=ticker, error=error))


async def _refresh_one(
    ticker: str,
    trading_date: date,
    api_key: str,
    client: httpx.AsyncClient,
) -> Optional[str]:
    """Refresh one ticker. Returns an error description, or None on success."""
    try:
        bar = await tiingo.fetch_eod_bar(ticker, trading_date, api_key=api_key, client=client)
    except httpx.HTTPStatusError as e:
        return f"HTTP {e.response.status_code}"
    except (httpx.HTTPError, ValueError):
        return REQUEST_FAILED_ERROR

    if bar is None or bar.close <= 0:
        return NO_DATA_ERROR

    try:
        await prices_repo.upsert_price(ticker, bar)
    except SQLAlchemyError:
        logger.exception(f"Failed to store price for {ticker}")
        return REQUEST_FAILED_ERROR

    logger.debug(f"Tiingo EOD updated {ticker}: ${bar.close}")
    return None


async def refresh_all_prices(*, as_of: Optional[date] = None) -> RefreshResult:
    """
    Refresh every ticker held in the portfolio.

    Raises:
        ExternalServiceError: No Tiingo API key is configured
    """
    api_key = _require_api_key()

    tickers = await holdings_repo.list_tickers()
    if not tickers:
        return RefreshResult(trading_date=as_of or default_trading_date(), message="No holdings")

    logger.info(f"Updating {len(tickers)} tickers with Tiingo", extra={"tickers": tickers})
    return await update_prices_for_tickers(tickers, api_key=api_key, as_of=as_of)
