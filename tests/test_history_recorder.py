"""Tests for the portfolio history recorder."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from folio.services import history as history_service


class TestRecordPortfolioSnapshot:
    """Tests for record_portfolio_snapshot."""

    @pytest.mark.asyncio
    async def test_stores_current_totals(self, mocker, sample_holdings, sample_prices):
        """The stored point carries the valuation of holdings at stored prices."""
        mocker.patch("folio.repositories.holdings_orm.list_holdings", return_value=sample_holdings)
        mocker.patch("folio.repositories.prices_orm.get_all_prices", return_value=sample_prices)
        add = mocker.patch(
            "folio.repositories.history_orm.add_history_point",
            new_callable=AsyncMock,
            side_effect=lambda point: point,
        )
        now = datetime(2024, 3, 4, 0, 0, tzinfo=timezone.utc)

        point = await history_service.record_portfolio_snapshot(now=now)

        add.assert_awaited_once()
        assert point.recorded_at == now
        assert point.total_value == 2050
        assert point.total_invested == 2000
        assert point.gain_loss == 50
        assert point.gain_loss_percent == pytest.approx(2.5)
        assert point.holdings_count == 2

    @pytest.mark.asyncio
    async def test_empty_portfolio(self, mocker):
        mocker.patch("folio.repositories.holdings_orm.list_holdings", return_value=[])
        mocker.patch("folio.repositories.prices_orm.get_all_prices", return_value={})
        mocker.patch(
            "folio.repositories.history_orm.add_history_point",
            new_callable=AsyncMock,
            side_effect=lambda point: point,
        )

        point = await history_service.record_portfolio_snapshot()

        assert point.total_value == 0
        assert point.gain_loss_percent == 0
        assert point.holdings_count == 0


class TestListHistory:
    @pytest.mark.asyncio
    async def test_passes_limit(self, mocker):
        listing = mocker.patch("folio.repositories.history_orm.list_recent_history", return_value=[])
        await history_service.list_history(7)
        listing.assert_awaited_once_with(7)
