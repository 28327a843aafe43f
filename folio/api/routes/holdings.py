"""Holding CRUD routes."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from folio.domain import Category
from folio.schemas.portfolio import (
    HoldingCreateRequest,
    HoldingResponse,
    HoldingUpdateRequest,
)
from folio.services import holdings as holdings_service


router = APIRouter(prefix="/holdings")


@router.get("", response_model=List[HoldingResponse])
async def list_holdings(
    category: Optional[Category] = Query(default=None, description="Only holdings in this category"),
) -> List[HoldingResponse]:
    holdings = await holdings_service.list_holdings(category)
    return [HoldingResponse.model_validate(h) for h in holdings]


@router.get("/{holding_id}", response_model=HoldingResponse)
async def get_holding(holding_id: int) -> HoldingResponse:
    holding = await holdings_service.get_holding(holding_id)
    return HoldingResponse.model_validate(holding)


@router.post("", response_model=HoldingResponse, status_code=status.HTTP_201_CREATED)
async def create_holding(payload: HoldingCreateRequest) -> HoldingResponse:
    """Add a holding; its company name is looked up once at creation."""
    holding = await holdings_service.add_holding(
        payload.ticker,
        quantity=payload.quantity,
        purchase_price=payload.purchase_price,
        target_allocation_percent=payload.target_allocation_percent,
        category=payload.category,
    )
    return HoldingResponse.model_validate(holding)


@router.patch("/{holding_id}", response_model=HoldingResponse)
async def update_holding(holding_id: int, payload: HoldingUpdateRequest) -> HoldingResponse:
    holding = await holdings_service.update_holding(
        holding_id, payload.model_dump(exclude_none=True)
    )
    return HoldingResponse.model_validate(holding)


@router.delete("/{holding_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holding(holding_id: int) -> Response:
    await holdings_service.delete_holding(holding_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
