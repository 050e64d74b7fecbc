"""Request-scoped analytics context helpers for API routes."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from app.config import get_settings
from app.core.telemetry import analytics_span
from app.schemas import PortfolioRequest, ValuationPoint
from folio_analytics import AnalyticsConfig, AnalyticsContext
from folio_analytics.models import DailyValuation

logger = logging.getLogger(__name__)


def get_analytics_config() -> AnalyticsConfig:
    return get_settings().analytics_config()


def build_context(
    payload: PortfolioRequest,
    config: AnalyticsConfig,
    valuations: list[ValuationPoint] | None = None,
) -> AnalyticsContext:
    """Replay the posted ledger into a fresh context.

    Current prices are recorded as the valuation for ``as_of``; explicit
    valuation points posted for the same day take precedence.
    """

    context = AnalyticsContext(config)
    try:
        with analytics_span("ledger_replay", rows=len(payload.transactions), priced=len(payload.prices)):
            context.load_transactions(payload.transactions)
            if payload.prices:
                context.update_prices(payload.prices, payload.as_of)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if valuations:
        context.record_valuations(
            DailyValuation(date=point.date, market_value=point.market_value) for point in valuations
        )
    logger.debug(
        "Built analytics context: %d transactions, %d holdings, %d valuations",
        len(context.transactions),
        len(context.holdings),
        len(context.valuations),
    )
    return context
