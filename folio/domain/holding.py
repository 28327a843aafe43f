"""Holding and category domain models.

Type-safe representation of a position in one instrument.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Category(str, Enum):
    """Risk-tier bucket a holding belongs to.

    Core holdings are the stable base of the portfolio, Satellite holdings
    target growth and Speculative holdings are high-risk bets.
    """

    CORE = "Core"
    SATELLITE = "Satellite"
    SPECULATIVE = "Speculative"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
            alias = LEGACY_CATEGORY_LABELS.get(key)
            if alias is not None:
                return alias
        return None


# Labels used by the first version of the dashboard
LEGACY_CATEGORY_LABELS: dict[str, Category] = {
    "pilier": Category.CORE,
    "satellite": Category.SATELLITE,
    "pari": Category.SPECULATIVE,
}

# Display and ranking order
CATEGORY_ORDER: tuple[Category, ...] = (
    Category.CORE,
    Category.SATELLITE,
    Category.SPECULATIVE,
)


class Holding(BaseModel):
    """A position in one ticker.

    Immutable snapshot: edits go through the repository and produce a new
    snapshot rather than mutating this one.
    """

    id: int | None = Field(None, description="Identifier assigned at creation")
    ticker: str = Field(..., min_length=1, max_length=20, description="Ticker symbol")
    quantity: float = Field(..., gt=0, description="Number of shares (fractional allowed)")
    purchase_price: float = Field(..., gt=0, description="Cost basis per share in USD")
    target_allocation_percent: float = Field(
        default=0.0, ge=0, le=100, description="Desired share of portfolio value"
    )
    category: Category = Field(default=Category.CORE, description="Risk tier")
    company_name: str | None = Field(None, description="Display name resolved at creation")
    acquired_at: datetime | None = Field(None, description="Creation timestamp")

    model_config = {
        "from_attributes": True,
        "frozen": True,
    }

    @field_validator("ticker", mode="before")
    @classmethod
    def normalize_ticker(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v):
        # Accepts legacy labels ("Pilier", "Pari") as well as current names
        return Category(v) if isinstance(v, str) else v

    @property
    def invested_value(self) -> float:
        """Cost basis of the whole position."""
        return self.quantity * self.purchase_price

    @property
    def display_name(self) -> str:
        return self.company_name or self.ticker
