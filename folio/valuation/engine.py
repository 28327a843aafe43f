"""Portfolio valuation and allocation-drift calculations.

Pure functions turning a snapshot of holdings plus a ticker -> quote mapping
into per-position and aggregate metrics. Nothing here performs I/O or keeps
state, so every function can be called concurrently on independent
snapshots and always returns the same result for the same inputs.

Edge cases degrade to numeric fallbacks instead of raising:
- a ticker without a usable quote is valued at its purchase price
- a zero denominator yields a 0 percentage
- a zero target allocation gives a zero tolerance band
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Union

from folio.domain import CATEGORY_ORDER, Category, Holding, PortfolioHistoryPoint, PriceQuote


# Relative band around the target weight inside which a holding is on target
DRIFT_TOLERANCE = 0.20

PriceMap = Mapping[str, Union[PriceQuote, float]]


@dataclass(frozen=True)
class PositionMetrics:
    """Valuation of a single holding."""

    ticker: str
    current_price: float
    current_value: float
    invested_value: float
    gain_loss: float
    gain_loss_percent: float
    is_priced: bool  # False when valued at purchase price for lack of a quote

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "current_price": self.current_price,
            "current_value": self.current_value,
            "invested_value": self.invested_value,
            "gain_loss": self.gain_loss,
            "gain_loss_percent": self.gain_loss_percent,
            "is_priced": self.is_priced,
        }


@dataclass(frozen=True)
class PortfolioTotals:
    """Aggregate valuation of the whole portfolio."""

    total_invested: float
    total_current: float
    total_gain_loss: float
    total_gain_loss_percent: float
    holdings_count: int

    def to_dict(self) -> dict:
        return {
            "total_invested": self.total_invested,
            "total_current": self.total_current,
            "total_gain_loss": self.total_gain_loss,
            "total_gain_loss_percent": self.total_gain_loss_percent,
            "holdings_count": self.holdings_count,
        }


@dataclass(frozen=True)
class CategoryRollup:
    """Aggregate of the holdings in one category.

    ``target_sum`` is the plain sum of the per-holding targets in the
    category; it is not normalized against 100.
    """

    category: Category
    category_value: float
    allocation_percent: float
    target_sum: float
    count: int

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "category_value": self.category_value,
            "allocation_percent": self.allocation_percent,
            "target_sum": self.target_sum,
            "count": self.count,
        }


@dataclass(frozen=True)
class AllocationDrift:
    """Actual portfolio weight of a holding compared to its target."""

    ticker: str
    current_percentage: float
    target_percentage: float
    tolerance: float
    drift: float  # current - target, in percentage points
    is_on_target: bool

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "current_percentage": self.current_percentage,
            "target_percentage": self.target_percentage,
            "tolerance": self.tolerance,
            "drift": self.drift,
            "is_on_target": self.is_on_target,
        }


@dataclass(frozen=True)
class HoldingValuation:
    """One dashboard row: the holding with its metrics and drift."""

    holding: Holding
    metrics: PositionMetrics
    drift: AllocationDrift


@dataclass(frozen=True)
class AllocationSlice:
    """Share of portfolio value held in one position."""

    ticker: str
    category: Category
    current_value: float
    weight_percent: float


@dataclass(frozen=True)
class PerformanceEntry:
    ticker: str
    category: Category
    gain_loss_percent: float


@dataclass(frozen=True)
class HistoryChange:
    """Value change between the first and last point of a history window."""

    start_value: float
    end_value: float
    absolute: float
    percent: float


# ---------------------------------------------------------------------------
# Per-holding metrics
# ---------------------------------------------------------------------------


def _quote_price(quote: PriceQuote | float | None) -> float | None:
    if quote is None:
        return None
    if isinstance(quote, PriceQuote):
        return quote.price
    return float(quote)


def current_price(holding: Holding, prices: PriceMap) -> float:
    """Latest market price for the holding, or its purchase price when unpriced.

    A quote whose price is not positive counts as missing.
    """
    price = _quote_price(prices.get(holding.ticker))
    if price is not None and price > 0:
        return price
    return holding.purchase_price


def position_metrics(holding: Holding, prices: PriceMap) -> PositionMetrics:
    """Compute current value, cost basis and gain/loss for one holding."""
    price = current_price(holding, prices)
    quoted = _quote_price(prices.get(holding.ticker))

    current_value = holding.quantity * price
    invested_value = holding.quantity * holding.purchase_price
    gain_loss = current_value - invested_value
    gain_loss_percent = gain_loss / invested_value * 100 if invested_value > 0 else 0.0

    return PositionMetrics(
        ticker=holding.ticker,
        current_price=price,
        current_value=current_value,
        invested_value=invested_value,
        gain_loss=gain_loss,
        gain_loss_percent=gain_loss_percent,
        is_priced=quoted is not None and quoted > 0,
    )


def _performance(holding: Holding, prices: PriceMap) -> float:
    """Price return as a fraction, used for ordering."""
    if holding.purchase_price <= 0:
        return 0.0
    return (current_price(holding, prices) - holding.purchase_price) / holding.purchase_price


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def _total_current(holdings: Iterable[Holding], prices: PriceMap) -> float:
    return sum(h.quantity * current_price(h, prices) for h in holdings)


def portfolio_totals(holdings: Sequence[Holding], prices: PriceMap) -> PortfolioTotals:
    """Sum cost basis and market value across all holdings."""
    total_invested = sum(h.quantity * h.purchase_price for h in holdings)
    total_current = _total_current(holdings, prices)
    total_gain_loss = total_current - total_invested
    total_gain_loss_percent = (
        total_gain_loss / total_invested * 100 if total_invested > 0 else 0.0
    )
    return PortfolioTotals(
        total_invested=total_invested,
        total_current=total_current,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percent=total_gain_loss_percent,
        holdings_count=len(holdings),
    )


def category_rollup(
    holdings: Sequence[Holding],
    prices: PriceMap,
    category: Category,
) -> CategoryRollup:
    """Value, weight and summed targets of the holdings in ``category``."""
    category = Category(category)
    in_category = [h for h in holdings if h.category == category]

    total_current = _total_current(holdings, prices)
    category_value = _total_current(in_category, prices)
    allocation_percent = category_value / total_current * 100 if total_current > 0 else 0.0

    return CategoryRollup(
        category=category,
        category_value=category_value,
        allocation_percent=allocation_percent,
        target_sum=sum(h.target_allocation_percent for h in in_category),
        count=len(in_category),
    )


def category_rollups(holdings: Sequence[Holding], prices: PriceMap) -> list[CategoryRollup]:
    """Rollups for every category, in display order."""
    return [category_rollup(holdings, prices, category) for category in CATEGORY_ORDER]


def _drift(holding: Holding, current_value: float, total_current: float) -> AllocationDrift:
    current_percentage = current_value / total_current * 100 if total_current > 0 else 0.0
    target = holding.target_allocation_percent
    tolerance = target * DRIFT_TOLERANCE
    return AllocationDrift(
        ticker=holding.ticker,
        current_percentage=current_percentage,
        target_percentage=target,
        tolerance=tolerance,
        drift=current_percentage - target,
        is_on_target=abs(current_percentage - target) <= tolerance,
    )


def allocation_drift(
    holding: Holding,
    holdings: Sequence[Holding],
    prices: PriceMap,
) -> AllocationDrift:
    """Compare a holding's weight in ``holdings`` with its target.

    The holding is on target when its weight is within 20% (relative) of the
    target. A target of 0 means the holding should not be held at all, so
    any nonzero weight is off target.
    """
    current_value = holding.quantity * current_price(holding, prices)
    return _drift(holding, current_value, _total_current(holdings, prices))


# ---------------------------------------------------------------------------
# Orderings
# ---------------------------------------------------------------------------


def ranked_holdings(holdings: Sequence[Holding], prices: PriceMap) -> Iterator[Holding]:
    """Yield holdings grouped by category, best performers first.

    Categories come in the fixed order Core, Satellite, Speculative. Within a
    category holdings are sorted by descending price return; ``sorted`` is
    stable so equal performers keep their input order. The ordering is
    recomputed from scratch on every call.
    """
    for category in CATEGORY_ORDER:
        in_category = [h for h in holdings if h.category == category]
        yield from sorted(in_category, key=lambda h: _performance(h, prices), reverse=True)


def holding_valuations(holdings: Sequence[Holding], prices: PriceMap) -> list[HoldingValuation]:
    """Per-holding metrics and drift, in ranked order."""
    total_current = _total_current(holdings, prices)
    rows = []
    for holding in ranked_holdings(holdings, prices):
        metrics = position_metrics(holding, prices)
        rows.append(
            HoldingValuation(
                holding=holding,
                metrics=metrics,
                drift=_drift(holding, metrics.current_value, total_current),
            )
        )
    return rows


def allocation_breakdown(holdings: Sequence[Holding], prices: PriceMap) -> list[AllocationSlice]:
    """One slice per holding ordered by category, then by descending value."""
    total_current = _total_current(holdings, prices)
    order = {category: index for index, category in enumerate(CATEGORY_ORDER)}

    slices = []
    for holding in holdings:
        value = holding.quantity * current_price(holding, prices)
        slices.append(
            AllocationSlice(
                ticker=holding.ticker,
                category=holding.category,
                current_value=value,
                weight_percent=value / total_current * 100 if total_current > 0 else 0.0,
            )
        )
    return sorted(slices, key=lambda s: (order[s.category], -s.current_value))


def performance_ranking(holdings: Sequence[Holding], prices: PriceMap) -> list[PerformanceEntry]:
    """Holdings ordered by descending gain/loss percentage across categories."""
    entries = [
        PerformanceEntry(
            ticker=h.ticker,
            category=h.category,
            gain_loss_percent=position_metrics(h, prices).gain_loss_percent,
        )
        for h in holdings
    ]
    return sorted(entries, key=lambda e: e.gain_loss_percent, reverse=True)


def history_change(points: Sequence[PortfolioHistoryPoint]) -> HistoryChange | None:
    """Change in total value from the first to the last history point.

    ``points`` must be in chronological order. Returns None for an empty
    history.
    """
    if not points:
        return None
    start = points[0].total_value
    end = points[-1].total_value
    return HistoryChange(
        start_value=start,
        end_value=end,
        absolute=end - start,
        percent=(end - start) / start * 100 if start != 0 else 0.0,
    )
