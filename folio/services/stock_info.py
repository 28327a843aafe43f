"""Company metadata lookup used when a holding is created."""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic import BaseModel, Field

from folio.core.config import settings
from folio.core.logging import get_logger
from folio.services import tiingo

logger = get_logger("services.stock_info")


class StockInfo(BaseModel):
    """Display metadata for a ticker."""

    ticker: str = Field(..., description="Ticker symbol")
    name: str = Field(..., description="Company display name")
    sector: str = Field(default="N/A", description="Sector, when the provider knows it")


async def get_stock_info(
    ticker: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> StockInfo:
    """
    Resolve display metadata for ``ticker``.

    Never raises: a missing API key, an HTTP or transport error, or a
    response without a name all fall back to using the ticker as the name.
    """
    symbol = ticker.strip().upper()
    fallback = StockInfo(ticker=symbol, name=symbol)

    api_key = settings.tiingo_api_key
    if not api_key:
        logger.warning("Tiingo API key not configured, using ticker as name")
        return fallback

    try:
        data = await tiingo.fetch_metadata(symbol, api_key=api_key, client=client)
    except httpx.HTTPStatusError as e:
        logger.warning(
            f"Tiingo metadata error for {symbol}: HTTP {e.response.status_code}"
        )
        return fallback
    except httpx.HTTPError as e:
        logger.warning(f"Tiingo metadata request failed for {symbol}: {type(e).__name__}")
        return fallback
    except ValueError:
        logger.warning(f"Tiingo metadata for {symbol} was not valid JSON")
        return fallback

    return StockInfo(
        ticker=str(data.get("ticker") or symbol).upper(),
        name=str(data.get("name") or symbol),
        sector=str(data.get("sector") or "N/A"),
    )


async def resolve_company_name(ticker: str) -> str:
    """Display name for ``ticker``; the ticker itself when unknown."""
    info = await get_stock_info(ticker)
    return info.name
