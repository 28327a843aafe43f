"""Database layer: async engine, sessions and ORM tables."""

from .connection import close_sqlalchemy_engine, get_session, init_sqlalchemy_engine
from .orm import Base, HoldingRecord, PortfolioHistory, StockPrice, TransactionLog


__all__ = [
    "Base",
    "HoldingRecord",
    "PortfolioHistory",
    "StockPrice",
    "TransactionLog",
    "close_sqlalchemy_engine",
    "get_session",
    "init_sqlalchemy_engine",
]
