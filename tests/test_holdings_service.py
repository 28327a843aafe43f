"""Tests for the holding lifecycle service."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from folio.core.exceptions import NotFoundError, RepositoryError, ValidationError
from folio.domain import Category, TransactionType
from folio.services import holdings as holdings_service


@pytest.fixture
def append(mocker) -> AsyncMock:
    return mocker.patch("folio.repositories.transactions_orm.append_transaction", new_callable=AsyncMock)


@pytest.fixture
def company_name(mocker) -> AsyncMock:
    return mocker.patch(
        "folio.services.holdings.resolve_company_name",
        new_callable=AsyncMock,
        return_value="Apple Inc",
    )


class TestAddHolding:
    """Tests for add_holding."""

    @pytest.mark.asyncio
    async def test_creates_and_logs(self, mocker, append, company_name, holding_factory):
        """The holding is stored with the resolved name and one ADD entry is logged."""
        created = holding_factory("AAPL", 10, 150, target=20, company_name="Apple Inc", id=7)
        create = mocker.patch(
            "folio.repositories.holdings_orm.create_holding",
            new_callable=AsyncMock,
            return_value=created,
        )

        result = await holdings_service.add_holding(
            " aapl ", quantity=10, purchase_price=150, target_allocation_percent=20, category="Pilier"
        )

        assert result is created
        company_name.assert_awaited_once_with("AAPL")
        create.assert_awaited_once_with(
            "AAPL",
            quantity=10,
            purchase_price=150,
            target_allocation_percent=20,
            category=Category.CORE,
            company_name="Apple Inc",
        )
        append.assert_awaited_once()
        type_, ticker, details = append.await_args.args
        assert type_ is TransactionType.ADD
        assert ticker == "AAPL"
        assert details["total_invested"] == 1500
        assert details["category"] == "Core"
        assert details["company_name"] == "Apple Inc"

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"ticker": "  "}, "Ticker is required"),
            ({"quantity": 0}, "Quantity must be greater than 0"),
            ({"purchase_price": -5}, "Purchase price must be greater than 0"),
            ({"target_allocation_percent": 120}, "Target allocation must be between 0 and 100"),
            ({"category": "Moonshot"}, "Unknown category: Moonshot"),
        ],
    )
    @pytest.mark.asyncio
    async def test_validation(self, mocker, append, company_name, kwargs, message):
        """Invalid input is rejected before any lookup or write."""
        create = mocker.patch("folio.repositories.holdings_orm.create_holding", new_callable=AsyncMock)
        data = {"ticker": "AAPL", "quantity": 1, "purchase_price": 10, **kwargs}
        ticker = data.pop("ticker")

        with pytest.raises(ValidationError) as exc_info:
            await holdings_service.add_holding(ticker, **data)

        assert exc_info.value.message == message
        company_name.assert_not_awaited()
        create.assert_not_awaited()
        append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repository_failure(self, mocker, append, company_name):
        """A failed write surfaces as a generic repository error."""
        mocker.patch(
            "folio.repositories.holdings_orm.create_holding",
            new_callable=AsyncMock,
            side_effect=OperationalError("INSERT", {}, Exception("db down")),
        )

        with pytest.raises(RepositoryError) as exc_info:
            await holdings_service.add_holding("AAPL", quantity=1, purchase_price=10)

        assert exc_info.value.status_code == 500
        append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_log_failure_does_not_fail(self, mocker, company_name, holding_factory):
        """The holding is returned even when the log entry cannot be written."""
        created = holding_factory("AAPL", id=3)
        mocker.patch("folio.repositories.holdings_orm.create_holding", return_value=created)
        mocker.patch(
            "folio.repositories.transactions_orm.append_transaction",
            new_callable=AsyncMock,
            side_effect=OperationalError("INSERT", {}, Exception("db down")),
        )

        assert await holdings_service.add_holding("AAPL", quantity=1, purchase_price=10) is created


class TestUpdateHolding:
    """Tests for update_holding."""

    @pytest.mark.asyncio
    async def test_updates_and_logs_before_after(self, mocker, append, holding_factory):
        before = holding_factory("AAPL", 10, 150, target=20, id=1, company_name="Apple Inc")
        after = before.model_copy(update={"quantity": 12})
        update = mocker.patch(
            "folio.repositories.holdings_orm.update_holding",
            new_callable=AsyncMock,
            return_value=(before, after),
        )

        result = await holdings_service.update_holding(1, {"quantity": 12, "ticker": "MSFT", "purchase_price": None})

        assert result is after
        update.assert_awaited_once_with(1, {"quantity": 12})
        type_, ticker, details = append.await_args.args
        assert type_ is TransactionType.UPDATE
        assert ticker == "AAPL"
        assert details["before"]["quantity"] == 10
        assert details["before"]["company_name"] == "Apple Inc"
        assert details["after"] == {"quantity": 12}

    @pytest.mark.asyncio
    async def test_category_label_normalized(self, mocker, append, holding_factory):
        before = holding_factory("AAPL")
        update = mocker.patch(
            "folio.repositories.holdings_orm.update_holding",
            new_callable=AsyncMock,
            return_value=(before, before.model_copy(update={"category": Category.SPECULATIVE})),
        )

        await holdings_service.update_holding(1, {"category": "pari"})

        update.assert_awaited_once_with(1, {"category": "Speculative"})

    @pytest.mark.asyncio
    async def test_unknown_id(self, mocker, append):
        mocker.patch("folio.repositories.holdings_orm.update_holding", return_value=None)

        with pytest.raises(NotFoundError):
            await holdings_service.update_holding(99, {"quantity": 1})
        append.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_editable_fields(self, mocker, append):
        update = mocker.patch("folio.repositories.holdings_orm.update_holding", new_callable=AsyncMock)

        with pytest.raises(ValidationError):
            await holdings_service.update_holding(1, {"ticker": "MSFT"})
        update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_value(self, mocker, append):
        mocker.patch("folio.repositories.holdings_orm.update_holding", new_callable=AsyncMock)

        with pytest.raises(ValidationError) as exc_info:
            await holdings_service.update_holding(1, {"target_allocation_percent": -1})
        assert "between 0 and 100" in exc_info.value.message


class TestDeleteHolding:
    """Tests for delete_holding."""

    @pytest.mark.asyncio
    async def test_deletes_and_logs(self, mocker, append, holding_factory):
        deleted = holding_factory("TSLA", 4, 250, category=Category.SPECULATIVE, id=5)
        mocker.patch("folio.repositories.holdings_orm.delete_holding", return_value=deleted)

        assert await holdings_service.delete_holding(5) is deleted

        append.assert_awaited_once()
        type_, ticker, details = append.await_args.args
        assert type_ is TransactionType.DELETE
        assert ticker == "TSLA"
        assert details == {
            "quantity": 4,
            "purchase_price": 250,
            "category": "Speculative",
            "company_name": "N/A",
            "total_invested": 1000,
        }

    @pytest.mark.asyncio
    async def test_unknown_id(self, mocker, append):
        mocker.patch("folio.repositories.holdings_orm.delete_holding", return_value=None)

        with pytest.raises(NotFoundError):
            await holdings_service.delete_holding(42)
        append.assert_not_awaited()


class TestQueries:
    """Tests for read operations."""

    @pytest.mark.asyncio
    async def test_get_missing_holding(self, mocker):
        mocker.patch("folio.repositories.holdings_orm.get_holding", return_value=None)
        with pytest.raises(NotFoundError):
            await holdings_service.get_holding(1)

    @pytest.mark.asyncio
    async def test_list_by_category(self, mocker):
        by_category = mocker.patch("folio.repositories.holdings_orm.list_holdings_by_category", return_value=[])
        await holdings_service.list_holdings("Satellite")
        by_category.assert_awaited_once_with(Category.SATELLITE)

    @pytest.mark.asyncio
    async def test_list_transactions_limit(self, mocker):
        listing = mocker.patch("folio.repositories.transactions_orm.list_transactions", return_value=[])
        await holdings_service.list_transactions(10)
        listing.assert_awaited_once_with(10)
