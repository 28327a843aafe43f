"""SQLAlchemy ORM models for Folio.

Defines the tables using SQLAlchemy 2.0 ORM style with async support via the
asyncpg driver.

Usage:
    from folio.database.orm import StockPrice
    from folio.database.connection import get_session

    async with get_session() as session:
        quote = await session.get(StockPrice, "AAPL")
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Naming convention for constraints and indexes (deterministic names for Alembic)
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all ORM models with naming convention."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class HoldingRecord(Base):
    """A position in one ticker."""
    __tablename__ = "holdings"

    id: Mapped[int] = mapped_column(primary_key=True)
    ticker: Mapped[str] = mapped_column(String(20), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    purchase_price: Mapped[float] = mapped_column(Float, nullable=False)
    target_allocation_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    category: Mapped[str] = mapped_column(String(20), nullable=False)
    company_name: Mapped[str | None] = mapped_column(String(255))
    acquired_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="quantity_positive"),
        CheckConstraint("purchase_price > 0", name="purchase_price_positive"),
        CheckConstraint(
            "target_allocation_percent >= 0 AND target_allocation_percent <= 100",
            name="target_range",
        ),
        CheckConstraint(
            "category IN ('Core', 'Satellite', 'Speculative')",
            name="category",
        ),
        Index("idx_holdings_ticker", "ticker"),
        Index("idx_holdings_category", "category"),
    )


class StockPrice(Base):
    """Latest end-of-day bar per ticker, written by the price refresh."""
    __tablename__ = "stock_prices"

    ticker: Mapped[str] = mapped_column(String(20), primary_key=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    open: Mapped[float | None] = mapped_column(Float)
    high: Mapped[float | None] = mapped_column(Float)
    low: Mapped[float | None] = mapped_column(Float)
    volume: Mapped[int | None] = mapped_column(BigInteger)
    bar_date: Mapped[date | None] = mapped_column(Date)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class TransactionLog(Base):
    """Append-only audit log of holding changes."""
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    ticker: Mapped[str] = mapped_column(String(20), nullable=False)
    details: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("type IN ('ADD', 'UPDATE', 'DELETE')", name="type"),
        Index("idx_transactions_created", "created_at", postgresql_ops={"created_at": "DESC"}),
    )


class PortfolioHistory(Base):
    """Daily aggregate valuation snapshots."""
    __tablename__ = "portfolio_history"

    id: Mapped[int] = mapped_column(primary_key=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total_value: Mapped[float] = mapped_column(Float, nullable=False)
    total_invested: Mapped[float] = mapped_column(Float, nullable=False)
    gain_loss: Mapped[float] = mapped_column(Float, nullable=False)
    gain_loss_percent: Mapped[float] = mapped_column(Float, nullable=False)
    holdings_count: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_portfolio_history_recorded", "recorded_at", postgresql_ops={"recorded_at": "DESC"}),
    )
