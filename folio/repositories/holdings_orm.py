"""Holdings repository - SQLAlchemy ORM async."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select

from folio.database.connection import get_session
from folio.database.orm import HoldingRecord
from folio.domain import Category, Holding


# Fields an edit may change; ticker and id are fixed at creation
EDITABLE_FIELDS = ("quantity", "purchase_price", "target_allocation_percent", "category")


def _to_domain(record: HoldingRecord) -> Holding:
    return Holding.model_validate(record)


async def list_holdings() -> list[Holding]:
    """List all holdings in insertion order."""
    async with get_session() as session:
        result = await session.execute(select(HoldingRecord).order_by(HoldingRecord.id))
        return [_to_domain(r) for r in result.scalars().all()]


async def list_holdings_by_category(category: Category) -> list[Holding]:
    """List holdings in one category."""
    async with get_session() as session:
        result = await session.execute(
            select(HoldingRecord)
            .where(HoldingRecord.category == Category(category).value)
            .order_by(HoldingRecord.id)
        )
        return [_to_domain(r) for r in result.scalars().all()]


async def get_holding(holding_id: int) -> Holding | None:
    """Get a holding by id."""
    async with get_session() as session:
        record = await session.get(HoldingRecord, holding_id)
        return _to_domain(record) if record else None


async def list_tickers() -> list[str]:
    """Distinct tickers across all holdings, sorted."""
    async with get_session() as session:
        result = await session.execute(
            select(HoldingRecord.ticker).distinct().order_by(HoldingRecord.ticker)
        )
        return [t for t in result.scalars().all() if t]


async def create_holding(
    ticker: str,
    *,
    quantity: float,
    purchase_price: float,
    target_allocation_percent: float,
    category: Category,
    company_name: str | None,
) -> Holding:
    """Insert a holding and return it with its assigned id."""
    async with get_session() as session:
        record = HoldingRecord(
            ticker=ticker.strip().upper(),
            quantity=quantity,
            purchase_price=purchase_price,
            target_allocation_percent=target_allocation_percent,
            category=Category(category).value,
            company_name=company_name,
        )
        session.add(record)
        await session.commit()
        await session.refresh(record)
        return _to_domain(record)


async def update_holding(
    holding_id: int,
    changes: dict[str, Any],
) -> tuple[Holding, Holding] | None:
    """Apply ``changes`` to a holding.

    Returns (before, after) snapshots, or None if the holding does not exist.
    Keys outside EDITABLE_FIELDS are ignored.
    """
    async with get_session() as session:
        record = await session.get(HoldingRecord, holding_id)
        if not record:
            return None

        before = _to_domain(record)
        for field in EDITABLE_FIELDS:
            if field not in changes or changes[field] is None:
                continue
            value = changes[field]
            if field == "category":
                value = Category(value).value
            setattr(record, field, value)

        await session.commit()
        await session.refresh(record)
        return before, _to_domain(record)


async def delete_holding(holding_id: int) -> Holding | None:
    """Delete a holding. Returns the deleted snapshot, or None if missing."""
    async with get_session() as session:
        record = await session.get(HoldingRecord, holding_id)
        if not record:
            return None

        snapshot = _to_domain(record)
        await session.delete(record)
        await session.commit()
        return snapshot
