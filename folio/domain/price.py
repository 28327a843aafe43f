"""Price domain models.

Type-safe representations of end-of-day bars and stored price quotes.
"""

from __future__ import annotations

from datetime import date as DateType
from datetime import datetime

from pydantic import BaseModel, Field, computed_field, field_validator


class PriceBar(BaseModel):
    """Single end-of-day OHLCV bar for one ticker."""

    date: DateType = Field(..., description="Trading date")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: int = Field(default=0, ge=0, description="Trading volume")

    model_config = {
        "from_attributes": True,
    }

    @computed_field
    @property
    def change_pct(self) -> float:
        """Intraday change percentage (close vs open)."""
        if self.open > 0:
            return (self.close - self.open) / self.open * 100
        return 0.0


class PriceQuote(BaseModel):
    """Latest known market price for a ticker."""

    ticker: str = Field(..., min_length=1, description="Ticker symbol")
    price: float = Field(..., description="Latest close in USD")
    last_updated: datetime | None = Field(None, description="When the quote was stored")
    bar_date: DateType | None = Field(None, description="Trading date of the bar")
    open: float | None = None
    high: float | None = None
    low: float | None = None
    volume: int | None = None

    model_config = {
        "from_attributes": True,
        "frozen": True,
    }

    @field_validator("ticker", mode="before")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v
