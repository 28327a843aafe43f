"""Price store repository - latest EOD bar per ticker."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert

from folio.database.connection import get_session
from folio.database.orm import StockPrice
from folio.domain import PriceBar, PriceQuote


def _to_domain(record: StockPrice) -> PriceQuote:
    return PriceQuote(
        ticker=record.ticker,
        price=record.price,
        last_updated=record.last_updated,
        bar_date=record.bar_date,
        open=record.open,
        high=record.high,
        low=record.low,
        volume=record.volume,
    )


async def get_all_prices() -> dict[str, PriceQuote]:
    """All stored quotes keyed by ticker."""
    async with get_session() as session:
        result = await session.execute(select(StockPrice))
        return {r.ticker: _to_domain(r) for r in result.scalars().all()}


async def get_price(ticker: str) -> PriceQuote | None:
    """Stored quote for one ticker, if any."""
    async with get_session() as session:
        record = await session.get(StockPrice, ticker.strip().upper())
        return _to_domain(record) if record else None


async def upsert_price(ticker: str, bar: PriceBar) -> None:
    """Store ``bar`` as the latest quote for ``ticker``."""
    now = datetime.now(timezone.utc)
    async with get_session() as session:
        stmt = insert(StockPrice).values(
            ticker=ticker.strip().upper(),
            price=bar.close,
            open=bar.open,
            high=bar.high,
            low=bar.low,
            volume=bar.volume,
            bar_date=bar.date,
            last_updated=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["ticker"],
            set_={
                "price": stmt.excluded.price,
                "open": stmt.excluded.open,
                "high": stmt.excluded.high,
                "low": stmt.excluded.low,
                "volume": stmt.excluded.volume,
                "bar_date": stmt.excluded.bar_date,
                "last_updated": now,
            },
        )
        await session.execute(stmt)
        await session.commit()
