"""Tests for the holdings and transactions API endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

from fastapi import status
from fastapi.testclient import TestClient

from folio.core.exceptions import NotFoundError, RepositoryError, ValidationError
from folio.domain import Category, TransactionLogEntry, TransactionType


class TestListHoldings:
    """Tests for GET /holdings."""

    def test_lists_holdings(self, client: TestClient, sample_holdings):
        with patch("folio.services.holdings.list_holdings", new_callable=AsyncMock, return_value=sample_holdings):
            response = client.get("/holdings")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [h["ticker"] for h in data] == ["A", "B"]
        assert data[1]["category"] == "Satellite"

    def test_category_filter(self, client: TestClient):
        with patch("folio.services.holdings.list_holdings", new_callable=AsyncMock, return_value=[]) as listing:
            response = client.get("/holdings", params={"category": "Speculative"})

        assert response.status_code == status.HTTP_200_OK
        listing.assert_awaited_once_with(Category.SPECULATIVE)

    def test_unknown_category_rejected(self, client: TestClient):
        response = client.get("/holdings", params={"category": "Moonshot"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT


class TestGetHolding:
    """Tests for GET /holdings/{id}."""

    def test_found(self, client: TestClient, holding_factory):
        holding = holding_factory("AAPL", id=3, company_name="Apple Inc")
        with patch("folio.services.holdings.get_holding", new_callable=AsyncMock, return_value=holding):
            response = client.get("/holdings/3")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["company_name"] == "Apple Inc"

    def test_not_found(self, client: TestClient):
        with patch(
            "folio.services.holdings.get_holding",
            new_callable=AsyncMock,
            side_effect=NotFoundError(message="Holding not found"),
        ):
            response = client.get("/holdings/99")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "NOT_FOUND"


class TestCreateHolding:
    """Tests for POST /holdings."""

    def test_creates_holding(self, client: TestClient, holding_factory):
        created = holding_factory("AAPL", 10, 150, target=20, id=1, company_name="Apple Inc")
        with patch("folio.services.holdings.add_holding", new_callable=AsyncMock, return_value=created) as add:
            response = client.post(
                "/holdings",
                json={
                    "ticker": "aapl",
                    "quantity": 10,
                    "purchase_price": 150,
                    "target_allocation_percent": 20,
                    "category": "Pilier",
                },
            )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["id"] == 1
        add.assert_awaited_once_with(
            "AAPL",
            quantity=10,
            purchase_price=150,
            target_allocation_percent=20,
            category=Category.CORE,
        )

    def test_rejects_invalid_quantity(self, client: TestClient):
        with patch("folio.services.holdings.add_holding", new_callable=AsyncMock) as add:
            response = client.post("/holdings", json={"ticker": "AAPL", "quantity": 0, "purchase_price": 10})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        add.assert_not_awaited()

    def test_rejects_target_over_100(self, client: TestClient):
        response = client.post(
            "/holdings",
            json={"ticker": "AAPL", "quantity": 1, "purchase_price": 10, "target_allocation_percent": 101},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    def test_repository_failure_is_generic(self, client: TestClient):
        with patch("folio.services.holdings.add_holding", new_callable=AsyncMock, side_effect=RepositoryError()):
            response = client.post("/holdings", json={"ticker": "AAPL", "quantity": 1, "purchase_price": 10})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["message"] == "Failed to save portfolio data"


class TestUpdateHolding:
    """Tests for PATCH /holdings/{id}."""

    def test_passes_only_given_fields(self, client: TestClient, holding_factory):
        updated = holding_factory("AAPL", quantity=12, id=1)
        with patch("folio.services.holdings.update_holding", new_callable=AsyncMock, return_value=updated) as update:
            response = client.patch("/holdings/1", json={"quantity": 12})

        assert response.status_code == status.HTTP_200_OK
        update.assert_awaited_once_with(1, {"quantity": 12})

    def test_empty_patch(self, client: TestClient):
        with patch(
            "folio.services.holdings.update_holding",
            new_callable=AsyncMock,
            side_effect=ValidationError(message="No editable fields provided"),
        ):
            response = client.patch("/holdings/1", json={})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["message"] == "No editable fields provided"


class TestDeleteHolding:
    """Tests for DELETE /holdings/{id}."""

    def test_deletes(self, client: TestClient, holding_factory):
        with patch("folio.services.holdings.delete_holding", new_callable=AsyncMock, return_value=holding_factory()):
            response = client.delete("/holdings/1")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert response.content == b""

    def test_not_found(self, client: TestClient):
        with patch(
            "folio.services.holdings.delete_holding",
            new_callable=AsyncMock,
            side_effect=NotFoundError(message="Holding not found"),
        ):
            response = client.delete("/holdings/1")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestTransactions:
    """Tests for GET /transactions."""

    def test_default_limit(self, client: TestClient):
        entry = TransactionLogEntry(
            id=1,
            type=TransactionType.ADD,
            ticker="AAPL",
            details={"quantity": 1, "total_invested": 150},
            created_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
        )
        with patch("folio.services.holdings.list_transactions", new_callable=AsyncMock, return_value=[entry]) as listing:
            response = client.get("/transactions")

        assert response.status_code == status.HTTP_200_OK
        listing.assert_awaited_once_with(50)
        data = response.json()
        assert data[0]["type"] == "ADD"
        assert data[0]["details"]["total_invested"] == 150

    def test_custom_limit(self, client: TestClient):
        with patch("folio.services.holdings.list_transactions", new_callable=AsyncMock, return_value=[]) as listing:
            client.get("/transactions", params={"limit": 5})
        listing.assert_awaited_once_with(5)
