"""Holding lifecycle: create, edit and delete with a transaction log entry each."""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from folio.core.exceptions import NotFoundError, RepositoryError, ValidationError
from folio.core.logging import get_logger
from folio.domain import Category, Holding, TransactionType
from folio.repositories import holdings_orm as holdings_repo
from folio.repositories import transactions_orm as transactions_repo
from folio.services.stock_info import resolve_company_name

logger = get_logger("services.holdings")


def _validate_fields(fields: dict[str, Any]) -> None:
    """Check holding invariants for whichever fields are present."""
    if "ticker" in fields and not str(fields["ticker"] or "").strip():
        raise ValidationError(message="Ticker is required")
    if "quantity" in fields and not fields["quantity"] > 0:
        raise ValidationError(message="Quantity must be greater than 0")
    if "purchase_price" in fields and not fields["purchase_price"] > 0:
        raise ValidationError(message="Purchase price must be greater than 0")
    if "target_allocation_percent" in fields and not 0 <= fields["target_allocation_percent"] <= 100:
        raise ValidationError(message="Target allocation must be between 0 and 100")
    if "category" in fields:
        try:
            Category(fields["category"])
        except ValueError:
            raise ValidationError(
                message=f"Unknown category: {fields['category']}",
                details={"allowed": [c.value for c in Category]},
            ) from None


def _snapshot(holding: Holding) -> dict[str, Any]:
    return {
        "quantity": holding.quantity,
        "purchase_price": holding.purchase_price,
        "category": holding.category.value,
        "target_allocation_percent": holding.target_allocation_percent,
        "company_name": holding.company_name or "N/A",
    }


async def _log_transaction(type: TransactionType, ticker: str, details: dict[str, Any]) -> None:
    # The holding write already succeeded; a lost log entry must not fail the request
    try:
        await transactions_repo.append_transaction(type, ticker, details)
    except SQLAlchemyError:
        logger.exception(f"Failed to log {type.value} transaction for {ticker}")


async def list_holdings(category: Category | None = None) -> list[Holding]:
    if category is None:
        return await holdings_repo.list_holdings()
    return await holdings_repo.list_holdings_by_category(Category(category))


async def get_holding(holding_id: int) -> Holding:
    holding = await holdings_repo.get_holding(holding_id)
    if holding is None:
        raise NotFoundError(message="Holding not found")
    return holding


async def add_holding(
    ticker: str,
    *,
    quantity: float,
    purchase_price: float,
    target_allocation_percent: float = 0.0,
    category: Category | str = Category.CORE,
) -> Holding:
    """
    Create a holding.

    The company name is resolved once here and never refreshed afterwards.

    Raises:
        ValidationError: An invariant is violated
        RepositoryError: The holding could not be stored
    """
    _validate_fields(
        {
            "ticker": ticker,
            "quantity": quantity,
            "purchase_price": purchase_price,
            "target_allocation_percent": target_allocation_percent,
            "category": category,
        }
    )
    symbol = ticker.strip().upper()
    category = Category(category)
    company_name = await resolve_company_name(symbol)

    try:
        holding = await holdings_repo.create_holding(
            symbol,
            quantity=quantity,
            purchase_price=purchase_price,
            target_allocation_percent=target_allocation_percent,
            category=category,
            company_name=company_name,
        )
    except SQLAlchemyError as e:
        logger.exception(f"Failed to create holding {symbol}")
        raise RepositoryError() from e

    await _log_transaction(
        TransactionType.ADD,
        symbol,
        {
            "ticker": symbol,
            "quantity": quantity,
            "purchase_price": purchase_price,
            "target_allocation_percent": target_allocation_percent,
            "category": category.value,
            "company_name": company_name,
            "total_invested": quantity * purchase_price,
        },
    )
    logger.info(f"Holding added: {symbol}", extra={"holding_id": holding.id})
    return holding


async def update_holding(holding_id: int, changes: dict[str, Any]) -> Holding:
    """
    Edit quantity, purchase price, target or category of a holding.

    Raises:
        ValidationError: No editable field given, or an invariant is violated
        NotFoundError: No holding with this id
        RepositoryError: The change could not be stored
    """
    editable = {
        k: v for k, v in changes.items()
        if k in holdings_repo.EDITABLE_FIELDS and v is not None
    }
    if not editable:
        raise ValidationError(
            message="No editable fields provided",
            details={"editable": list(holdings_repo.EDITABLE_FIELDS)},
        )
    _validate_fields(editable)
    if "category" in editable:
        editable["category"] = Category(editable["category"]).value

    try:
        result = await holdings_repo.update_holding(holding_id, editable)
    except SQLAlchemyError as e:
        logger.exception(f"Failed to update holding {holding_id}")
        raise RepositoryError() from e

    if result is None:
        raise NotFoundError(message="Holding not found")

    before, after = result
    await _log_transaction(
        TransactionType.UPDATE,
        before.ticker,
        {"before": _snapshot(before), "after": editable},
    )
    logger.info(f"Holding updated: {before.ticker}", extra={"holding_id": holding_id})
    return after


async def delete_holding(holding_id: int) -> Holding:
    """
    Delete a holding and record the deletion.

    Raises:
        NotFoundError: No holding with this id
        RepositoryError: The deletion could not be stored
    """
    try:
        deleted = await holdings_repo.delete_holding(holding_id)
    except SQLAlchemyError as e:
        logger.exception(f"Failed to delete holding {holding_id}")
        raise RepositoryError() from e

    if deleted is None:
        raise NotFoundError(message="Holding not found")

    await _log_transaction(
        TransactionType.DELETE,
        deleted.ticker,
        {
            "quantity": deleted.quantity,
            "purchase_price": deleted.purchase_price,
            "category": deleted.category.value,
            "company_name": deleted.company_name or "N/A",
            "total_invested": deleted.invested_value,
        },
    )
    logger.info(f"Holding deleted: {deleted.ticker}", extra={"holding_id": holding_id})
    return deleted


async def list_transactions(limit: int = 50):
    """Transaction log, newest first."""
    return await transactions_repo.list_transactions(limit)
