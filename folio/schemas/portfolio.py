"""Portfolio Pydantic schemas for API requests and responses."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from folio.domain import Category, PortfolioHistoryPoint, PriceQuote, TransactionType
from folio.valuation import (
    AllocationSlice,
    CategoryRollup,
    HistoryChange,
    HoldingValuation,
    PerformanceEntry,
    PortfolioTotals,
)


def _mask(value: float | None, private: bool) -> float | None:
    return None if private else value


def _coerce_category(v: Any) -> Any:
    if isinstance(v, str):
        try:
            return Category(v)
        except ValueError:
            return v  # let pydantic report the enum error
    return v


class HoldingCreateRequest(BaseModel):
    """Create holding request."""

    ticker: str = Field(..., min_length=1, max_length=20)
    quantity: float = Field(..., gt=0)
    purchase_price: float = Field(..., gt=0, description="Cost basis per share in USD")
    target_allocation_percent: float = Field(default=0.0, ge=0, le=100)
    category: Category = Category.CORE

    @field_validator("ticker", mode="before")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        return v.upper().strip() if isinstance(v, str) else v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        return _coerce_category(v)


class HoldingUpdateRequest(BaseModel):
    """Update holding request. Ticker and company name are immutable."""

    quantity: float | None = Field(default=None, gt=0)
    purchase_price: float | None = Field(default=None, gt=0)
    target_allocation_percent: float | None = Field(default=None, ge=0, le=100)
    category: Category | None = None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        return _coerce_category(v)


class HoldingResponse(BaseModel):
    """Holding response."""

    id: int
    ticker: str
    company_name: str | None = None
    quantity: float
    purchase_price: float
    target_allocation_percent: float
    category: Category
    acquired_at: datetime | None = None

    model_config = {"from_attributes": True}


class HoldingValuationResponse(BaseModel):
    """Dashboard row: holding, valuation and allocation drift."""

    id: int | None
    ticker: str
    company_name: str
    category: Category
    quantity: float | None
    purchase_price: float | None
    current_price: float | None
    current_value: float | None
    invested_value: float | None
    gain_loss: float | None
    gain_loss_percent: float
    is_priced: bool
    current_percentage: float
    target_percentage: float
    tolerance: float
    drift: float
    is_on_target: bool

    @classmethod
    def build(cls, row: HoldingValuation, private: bool = False) -> "HoldingValuationResponse":
        holding, metrics, drift = row.holding, row.metrics, row.drift
        return cls(
            id=holding.id,
            ticker=holding.ticker,
            company_name=holding.display_name,
            category=holding.category,
            quantity=_mask(holding.quantity, private),
            purchase_price=_mask(holding.purchase_price, private),
            current_price=_mask(metrics.current_price, private),
            current_value=_mask(metrics.current_value, private),
            invested_value=_mask(metrics.invested_value, private),
            gain_loss=_mask(metrics.gain_loss, private),
            gain_loss_percent=metrics.gain_loss_percent,
            is_priced=metrics.is_priced,
            current_percentage=drift.current_percentage,
            target_percentage=drift.target_percentage,
            tolerance=drift.tolerance,
            drift=drift.drift,
            is_on_target=drift.is_on_target,
        )


class PortfolioTotalsResponse(BaseModel):
    """Aggregate totals. Amounts are null in private mode."""

    total_invested: float | None
    total_current: float | None
    total_gain_loss: float | None
    total_gain_loss_percent: float
    holdings_count: int

    @classmethod
    def build(cls, totals: PortfolioTotals, private: bool = False) -> "PortfolioTotalsResponse":
        return cls(
            total_invested=_mask(totals.total_invested, private),
            total_current=_mask(totals.total_current, private),
            total_gain_loss=_mask(totals.total_gain_loss, private),
            total_gain_loss_percent=totals.total_gain_loss_percent,
            holdings_count=totals.holdings_count,
        )


class CategoryRollupResponse(BaseModel):
    """Category rollup."""

    category: Category
    category_value: float | None
    allocation_percent: float
    target_sum: float
    count: int

    @classmethod
    def build(cls, rollup: CategoryRollup, private: bool = False) -> "CategoryRollupResponse":
        return cls(
            category=rollup.category,
            category_value=_mask(rollup.category_value, private),
            allocation_percent=rollup.allocation_percent,
            target_sum=rollup.target_sum,
            count=rollup.count,
        )


class PortfolioSummaryResponse(BaseModel):
    """Everything the dashboard needs in one payload."""

    private: bool = False
    totals: PortfolioTotalsResponse
    categories: list[CategoryRollupResponse] = Field(default_factory=list)
    holdings: list[HoldingValuationResponse] = Field(default_factory=list)


class AllocationSliceResponse(BaseModel):
    ticker: str
    category: Category
    current_value: float | None
    weight_percent: float

    @classmethod
    def build(cls, item: AllocationSlice, private: bool = False) -> "AllocationSliceResponse":
        return cls(
            ticker=item.ticker,
            category=item.category,
            current_value=_mask(item.current_value, private),
            weight_percent=item.weight_percent,
        )


class PerformanceEntryResponse(BaseModel):
    ticker: str
    category: Category
    gain_loss_percent: float

    @classmethod
    def build(cls, entry: PerformanceEntry) -> "PerformanceEntryResponse":
        return cls(
            ticker=entry.ticker,
            category=entry.category,
            gain_loss_percent=entry.gain_loss_percent,
        )


class HistoryPointResponse(BaseModel):
    """Portfolio history point."""

    recorded_at: datetime
    total_value: float
    total_invested: float
    gain_loss: float
    gain_loss_percent: float
    holdings_count: int

    model_config = {"from_attributes": True}


class HistoryChangeResponse(BaseModel):
    start_value: float
    end_value: float
    absolute: float
    percent: float

    @classmethod
    def build(cls, change: HistoryChange) -> "HistoryChangeResponse":
        return cls(
            start_value=change.start_value,
            end_value=change.end_value,
            absolute=change.absolute,
            percent=change.percent,
        )


class PortfolioHistoryResponse(BaseModel):
    """History points (oldest first) and the change over the window."""

    points: list[HistoryPointResponse] = Field(default_factory=list)
    change: HistoryChangeResponse | None = None

    @classmethod
    def build(
        cls,
        points: list[PortfolioHistoryPoint],
        change: HistoryChange | None,
    ) -> "PortfolioHistoryResponse":
        return cls(
            points=[HistoryPointResponse.model_validate(p) for p in points],
            change=HistoryChangeResponse.build(change) if change else None,
        )


class TransactionResponse(BaseModel):
    """Transaction log entry."""

    id: int
    type: TransactionType
    ticker: str
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    model_config = {"from_attributes": True}


class PriceQuoteResponse(BaseModel):
    """Stored price for one ticker."""

    ticker: str
    price: float
    bar_date: date | None = None
    last_updated: datetime | None = None
    open: float | None = None
    high: float | None = None
    low: float | None = None
    volume: int | None = None

    model_config = {"from_attributes": True}

    @classmethod
    def build(cls, quote: PriceQuote) -> "PriceQuoteResponse":
        return cls.model_validate(quote)


class TickerErrorResponse(BaseModel):
    ticker: str
    error: str


class PriceRefreshResponse(BaseModel):
    """Outcome of an on-demand price refresh."""

    success: bool = True
    message: str
    trading_date: date | None = None
    updated: list[str] = Field(default_factory=list)
    errors: list[TickerErrorResponse] = Field(default_factory=list)


class StockInfoResponse(BaseModel):
    """Company metadata."""

    ticker: str
    name: str
    sector: str = "N/A"

    model_config = {"from_attributes": True}
