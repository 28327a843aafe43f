"""History recorder: aggregate valuation snapshots for trend charts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from folio.core.logging import get_logger
from folio.domain import PortfolioHistoryPoint
from folio.repositories import history_orm as history_repo
from folio.repositories import holdings_orm as holdings_repo
from folio.repositories import prices_orm as prices_repo
from folio.valuation import portfolio_totals

logger = get_logger("services.history")


async def record_portfolio_snapshot(now: Optional[datetime] = None) -> PortfolioHistoryPoint:
    """Value the current holdings at stored prices and append one history point."""
    holdings = await holdings_repo.list_holdings()
    prices = await prices_repo.get_all_prices()

    totals = portfolio_totals(holdings, prices)
    point = PortfolioHistoryPoint(
        recorded_at=now or datetime.now(timezone.utc),
        total_value=totals.total_current,
        total_invested=totals.total_invested,
        gain_loss=totals.total_gain_loss,
        gain_loss_percent=totals.total_gain_loss_percent,
        holdings_count=totals.holdings_count,
    )

    stored = await history_repo.add_history_point(point)
    logger.info(
        f"Portfolio snapshot saved: ${totals.total_current:,.2f}",
        extra={"holdings_count": totals.holdings_count},
    )
    return stored


async def list_history(limit: int = 30) -> list[PortfolioHistoryPoint]:
    """Most recent ``limit`` points in chronological order."""
    return await history_repo.list_recent_history(limit)
