"""Portfolio ledger, metrics, correlation, tax and export endpoints."""

from __future__ import annotations

from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.dependencies import build_context, get_analytics_config
from app.core.telemetry import analytics_span
from app.schemas import (
    CorrelationPairSchema,
    CorrelationRequest,
    CorrelationResponse,
    HoldingSchema,
    HoldingsResponse,
    MetricsRequest,
    MetricsResponse,
    PortfolioRequest,
    TaxRequest,
    TaxResponse,
)
from folio_analytics import AnalyticsConfig
from folio_analytics.fx import FXRateProvider

router = APIRouter()


@router.post("/holdings", response_model=HoldingsResponse)
async def post_holdings(
    payload: PortfolioRequest,
    config: AnalyticsConfig = Depends(get_analytics_config),
) -> HoldingsResponse:
    """Replay the ledger and return open positions, marked to market when prices are given."""

    context = build_context(payload, config)
    holdings = sorted(context.holdings.values(), key=lambda h: h.symbol)
    return HoldingsResponse(
        holdings=[HoldingSchema.from_holding(h) for h in holdings],
        total_value=context.total_value,
        skipped_rows=len(payload.transactions) - len(context.transactions),
    )


@router.post("/metrics", response_model=MetricsResponse)
async def post_metrics(
    payload: MetricsRequest,
    config: AnalyticsConfig = Depends(get_analytics_config),
) -> MetricsResponse:
    if payload.risk_free_rate is not None:
        config = replace(config, risk_free_rate=payload.risk_free_rate)
    context = build_context(payload, config, payload.valuations)
    with analytics_span("metrics", period=payload.period, valuations=len(payload.valuations)):
        metrics = context.metrics(payload.period, payload.benchmark_returns, as_of=payload.as_of)
    return MetricsResponse.from_metrics(metrics)


@router.post("/correlation", response_model=CorrelationResponse)
async def post_correlation(
    payload: CorrelationRequest,
    config: AnalyticsConfig = Depends(get_analytics_config),
) -> CorrelationResponse:
    context = build_context(payload, config)
    with analytics_span("correlation", symbols=len(payload.price_history)):
        matrix = context.correlation(payload.price_history)
    return CorrelationResponse(
        pairs=[
            CorrelationPairSchema(symbol_a=a, symbol_b=b, correlation=value)
            for (a, b), value in matrix.items()
        ]
    )


@router.post("/tax", response_model=TaxResponse)
async def post_tax(
    payload: TaxRequest,
    config: AnalyticsConfig = Depends(get_analytics_config),
) -> TaxResponse:
    context = build_context(payload, config)
    fx_provider = None
    if payload.fx_rates:
        fx_provider = FXRateProvider(
            {
                (point.date, point.from_currency, point.to_currency): point.rate
                for point in payload.fx_rates
            },
            base_currency=config.reporting_currency,
        )
    try:
        with analytics_span("tax", fx_rates=len(payload.fx_rates)):
            summary = context.tax_liability(payload.year, fx_provider)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.args[0] if exc.args else "Missing FX rate",
        ) from exc
    return TaxResponse.from_summary(summary)


@router.post("/export")
async def post_export(
    payload: PortfolioRequest,
    config: AnalyticsConfig = Depends(get_analytics_config),
) -> Response:
    context = build_context(payload, config)
    return Response(
        content=context.export_holdings(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="holdings.csv"'},
    )


__all__ = ["router"]
