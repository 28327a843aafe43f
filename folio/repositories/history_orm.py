"""Portfolio history repository."""

from __future__ import annotations

from sqlalchemy import desc, select

from folio.database.connection import get_session
from folio.database.orm import PortfolioHistory
from folio.domain import PortfolioHistoryPoint


async def add_history_point(point: PortfolioHistoryPoint) -> PortfolioHistoryPoint:
    """Append a snapshot to the time series."""
    async with get_session() as session:
        record = PortfolioHistory(
            recorded_at=point.recorded_at,
            total_value=point.total_value,
            total_invested=point.total_invested,
            gain_loss=point.gain_loss,
            gain_loss_percent=point.gain_loss_percent,
            holdings_count=point.holdings_count,
        )
        session.add(record)
        await session.commit()
        await session.refresh(record)
        return PortfolioHistoryPoint.model_validate(record)


async def list_recent_history(limit: int = 30) -> list[PortfolioHistoryPoint]:
    """The latest ``limit`` points, oldest first."""
    async with get_session() as session:
        result = await session.execute(
            select(PortfolioHistory)
            .order_by(desc(PortfolioHistory.recorded_at))
            .limit(limit)
        )
        points = [PortfolioHistoryPoint.model_validate(r) for r in result.scalars().all()]
    points.reverse()
    return points
