"""Built-in job definitions for scheduled tasks.

Jobs:
- prices_daily: EOD price refresh plus one history snapshot (Mon-Fri 1 AM Europe/Paris)
"""

from __future__ import annotations

from folio.core.exceptions import ExternalServiceError
from folio.core.logging import get_logger
from folio.services import history as history_service
from folio.services import price_refresh

from .registry import register_job


logger = get_logger("jobs.definitions")


@register_job("prices_daily")
async def prices_daily_job() -> str:
    """
    Refresh stored prices for every held ticker, then snapshot the portfolio.

    The snapshot is taken once per run whatever the number of failed
    tickers, so the history stays one point per scheduled day. It is only
    skipped when there is nothing to value (no holdings) or no API key.

    Schedule: Mon-Fri at 1am Europe/Paris (yesterday's US close is published)
    """
    logger.info("Starting prices_daily job")

    try:
        result = await price_refresh.refresh_all_prices()
    except ExternalServiceError as e:
        logger.error(f"prices_daily skipped: {e.message}")
        return e.message

    if result.message == "No holdings":
        logger.info("No holdings to update")
        return "No holdings"

    point = await history_service.record_portfolio_snapshot()

    summary = result.summary
    logger.info(
        f"prices_daily completed: {summary}",
        extra={"total_value": point.total_value},
    )
    return summary
