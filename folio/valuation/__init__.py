"""Valuation engine: pure portfolio arithmetic."""

from .engine import (
    DRIFT_TOLERANCE,
    AllocationDrift,
    AllocationSlice,
    CategoryRollup,
    HistoryChange,
    HoldingValuation,
    PerformanceEntry,
    PortfolioTotals,
    PositionMetrics,
    allocation_breakdown,
    allocation_drift,
    category_rollup,
    category_rollups,
    current_price,
    history_change,
    holding_valuations,
    performance_ranking,
    portfolio_totals,
    position_metrics,
    ranked_holdings,
)


__all__ = [
    "DRIFT_TOLERANCE",
    "AllocationDrift",
    "AllocationSlice",
    "CategoryRollup",
    "HistoryChange",
    "HoldingValuation",
    "PerformanceEntry",
    "PortfolioTotals",
    "PositionMetrics",
    "allocation_breakdown",
    "allocation_drift",
    "category_rollup",
    "category_rollups",
    "current_price",
    "history_change",
    "holding_valuations",
    "performance_ranking",
    "portfolio_totals",
    "position_metrics",
    "ranked_holdings",
]
