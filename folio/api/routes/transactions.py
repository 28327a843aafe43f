"""Transaction log routes."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query

from folio.core.config import settings
from folio.schemas.portfolio import TransactionResponse
from folio.services import holdings as holdings_service


router = APIRouter(prefix="/transactions")


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(
    limit: int = Query(default=settings.transactions_default_limit, ge=1, le=500),
) -> List[TransactionResponse]:
    """Most recent log entries, newest first."""
    entries = await holdings_service.list_transactions(limit)
    return [TransactionResponse.model_validate(e) for e in entries]
