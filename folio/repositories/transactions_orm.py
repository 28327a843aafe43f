"""Transaction log repository. Entries are only ever appended."""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select

from folio.database.connection import get_session
from folio.database.orm import TransactionLog
from folio.domain import TransactionLogEntry, TransactionType


async def append_transaction(
    type: TransactionType,
    ticker: str,
    details: dict[str, Any],
) -> TransactionLogEntry:
    """Append one entry to the log."""
    async with get_session() as session:
        record = TransactionLog(
            type=TransactionType(type).value,
            ticker=ticker,
            details=details,
        )
        session.add(record)
        await session.commit()
        await session.refresh(record)
        return TransactionLogEntry.model_validate(record)


async def list_transactions(limit: int = 50) -> list[TransactionLogEntry]:
    """Most recent entries, newest first."""
    async with get_session() as session:
        result = await session.execute(
            select(TransactionLog)
            .order_by(desc(TransactionLog.created_at), desc(TransactionLog.id))
            .limit(limit)
        )
        return [TransactionLogEntry.model_validate(r) for r in result.scalars().all()]
