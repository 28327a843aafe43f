"""Portfolio dashboard routes: valuation summary, allocation, performance and history."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query

from folio.core.config import settings
from folio.domain import Holding, PriceQuote
from folio.repositories import holdings_orm as holdings_repo
from folio.repositories import prices_orm as prices_repo
from folio.schemas.portfolio import (
    AllocationSliceResponse,
    CategoryRollupResponse,
    HoldingValuationResponse,
    PerformanceEntryResponse,
    PortfolioHistoryResponse,
    PortfolioSummaryResponse,
    PortfolioTotalsResponse,
)
from folio.services import history as history_service
from folio.valuation import (
    allocation_breakdown,
    category_rollups,
    history_change,
    holding_valuations,
    performance_ranking,
    portfolio_totals,
)


router = APIRouter(prefix="/portfolio")


async def _load_snapshot() -> tuple[list[Holding], dict[str, PriceQuote]]:
    holdings = await holdings_repo.list_holdings()
    prices = await prices_repo.get_all_prices()
    return holdings, prices


@router.get("/summary", response_model=PortfolioSummaryResponse)
async def get_summary(
    private: bool = Query(default=False, description="Hide monetary amounts"),
) -> PortfolioSummaryResponse:
    """Totals, category rollups and ranked per-holding rows."""
    holdings, prices = await _load_snapshot()
    return PortfolioSummaryResponse(
        private=private,
        totals=PortfolioTotalsResponse.build(portfolio_totals(holdings, prices), private),
        categories=[
            CategoryRollupResponse.build(r, private) for r in category_rollups(holdings, prices)
        ],
        holdings=[
            HoldingValuationResponse.build(row, private) for row in holding_valuations(holdings, prices)
        ],
    )


@router.get("/allocation", response_model=List[AllocationSliceResponse])
async def get_allocation(
    private: bool = Query(default=False, description="Hide monetary amounts"),
) -> List[AllocationSliceResponse]:
    holdings, prices = await _load_snapshot()
    return [AllocationSliceResponse.build(s, private) for s in allocation_breakdown(holdings, prices)]


@router.get("/performance", response_model=List[PerformanceEntryResponse])
async def get_performance() -> List[PerformanceEntryResponse]:
    holdings, prices = await _load_snapshot()
    return [PerformanceEntryResponse.build(e) for e in performance_ranking(holdings, prices)]


@router.get("/history", response_model=PortfolioHistoryResponse)
async def get_history(
    limit: int = Query(default=settings.history_default_limit, ge=1, le=365),
) -> PortfolioHistoryResponse:
    """Most recent history points, oldest first, with the change over the window."""
    points = await history_service.list_history(limit)
    return PortfolioHistoryResponse.build(points, history_change(points))
