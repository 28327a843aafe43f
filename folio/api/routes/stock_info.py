"""Company metadata lookup route."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from folio.core.exceptions import BadRequestError
from folio.schemas.portfolio import StockInfoResponse
from folio.services import stock_info as stock_info_service


router = APIRouter(prefix="/stock-info")


@router.get("", response_model=StockInfoResponse)
async def get_stock_info(
    ticker: Optional[str] = Query(default=None, description="Ticker symbol"),
) -> StockInfoResponse:
    """Name and sector for a ticker. Falls back to the ticker as the name."""
    if not ticker or not ticker.strip():
        raise BadRequestError(message="Ticker is required")
    info = await stock_info_service.get_stock_info(ticker)
    return StockInfoResponse.model_validate(info)
