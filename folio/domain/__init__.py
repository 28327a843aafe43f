"""Domain models for strongly-typed data throughout the application.

Pydantic models passed between repositories, services and the valuation
engine instead of raw dictionaries.

Usage:
    from folio.domain import Holding, PriceQuote

    holding = Holding(ticker="AAPL", quantity=10, purchase_price=150)
    data = holding.model_dump()
"""

from folio.domain.holding import (
    CATEGORY_ORDER,
    Category,
    Holding,
)
from folio.domain.ledger import (
    PortfolioHistoryPoint,
    TransactionLogEntry,
    TransactionType,
)
from folio.domain.price import (
    PriceBar,
    PriceQuote,
)

__all__ = [
    # Holdings
    "CATEGORY_ORDER",
    "Category",
    "Holding",
    # Prices
    "PriceBar",
    "PriceQuote",
    # Ledger
    "PortfolioHistoryPoint",
    "TransactionLogEntry",
    "TransactionType",
]
