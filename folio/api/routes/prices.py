"""Stored price routes and on-demand refresh."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter

from folio.core.exceptions import NotFoundError
from folio.core.logging import get_logger
from folio.repositories import prices_orm as prices_repo
from folio.schemas.portfolio import PriceQuoteResponse, PriceRefreshResponse, TickerErrorResponse
from folio.services import price_refresh


router = APIRouter(prefix="/prices")

logger = get_logger("api.prices")


@router.get("", response_model=List[PriceQuoteResponse])
async def list_prices() -> List[PriceQuoteResponse]:
    prices = await prices_repo.get_all_prices()
    return [PriceQuoteResponse.build(q) for _, q in sorted(prices.items())]


@router.get("/{ticker}", response_model=PriceQuoteResponse)
async def get_price(ticker: str) -> PriceQuoteResponse:
    quote = await prices_repo.get_price(ticker.strip().upper())
    if quote is None:
        raise NotFoundError(message=f"No stored price for {ticker.upper()}")
    return PriceQuoteResponse.build(quote)


@router.post("/refresh", response_model=PriceRefreshResponse)
async def refresh_prices() -> PriceRefreshResponse:
    """
    Refresh every held ticker now.

    Same per-ticker handling as the daily job, but no history point is
    recorded.
    """
    result = await price_refresh.refresh_all_prices()
    message = result.message if result.message == "No holdings" else result.summary
    logger.info(f"Manual price refresh: {message}")
    return PriceRefreshResponse(
        success=True,
        message=message,
        trading_date=result.trading_date,
        updated=result.updated,
        errors=[TickerErrorResponse(**e.to_dict()) for e in result.errors],
    )
