"""Transaction log and portfolio history domain models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    """Kind of change recorded in the transaction log."""

    ADD = "ADD"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class TransactionLogEntry(BaseModel):
    """Immutable audit record of a holding create, update or delete."""

    id: int | None = None
    type: TransactionType
    ticker: str
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    model_config = {
        "from_attributes": True,
        "frozen": True,
    }


class PortfolioHistoryPoint(BaseModel):
    """Aggregate valuation snapshot taken by the daily job."""

    id: int | None = None
    recorded_at: datetime
    total_value: float
    total_invested: float
    gain_loss: float
    gain_loss_percent: float
    holdings_count: int = Field(..., ge=0)

    model_config = {
        "from_attributes": True,
        "frozen": True,
    }
