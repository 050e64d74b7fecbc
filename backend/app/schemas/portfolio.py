"""Pydantic schemas for ledger, metrics, correlation and tax endpoints."""

from __future__ import annotations

import math
from datetime import date
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, Field

from folio_analytics.models import Holding, PortfolioMetrics, TaxSummary

Period = Literal["1M", "3M", "6M", "1Y", "3Y", "5Y", "ALL"]


class ValuationPoint(BaseModel):
    date: date
    market_value: float = Field(..., ge=0.0)


class PortfolioRequest(BaseModel):
    """Raw ledger rows plus optional current prices, keyed by symbol."""

    transactions: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Ledger rows using the keys date, type, market, symbol, units, txPrice, fees, split",
    )
    prices: dict[str, float] = Field(default_factory=dict)
    as_of: date | None = None

    class Config:
        json_schema_extra = {
            "example": {
                "transactions": [
                    {"date": "2024-01-10", "type": "Buy", "market": "US", "symbol": "AAPL",
                     "units": 10, "txPrice": 150, "fees": 1},
                    {"date": "2024-03-15", "type": "Sell", "market": "US", "symbol": "AAPL",
                     "units": 5, "txPrice": 180, "fees": 1},
                ],
                "prices": {"AAPL": 190.0},
            }
        }


class LotSchema(BaseModel):
    units: Decimal
    cost_per_unit: Decimal
    acquisition_date: date


class HoldingSchema(BaseModel):
    symbol: str
    market: str
    currency: str
    sector: str
    units: Decimal
    total_cost: Decimal
    average_cost: Decimal
    realized_pl: Decimal
    total_dividends: Decimal
    current_price: Decimal
    market_value: Decimal
    unrealized_pl: Decimal
    first_purchase_date: date | None = None
    last_trade_date: date | None = None
    lots: list[LotSchema] = Field(default_factory=list)

    @classmethod
    def from_holding(cls, holding: Holding) -> "HoldingSchema":
        return cls(
            symbol=holding.symbol,
            market=holding.market,
            currency=holding.currency,
            sector=holding.sector,
            units=holding.units,
            total_cost=holding.total_cost,
            average_cost=holding.average_cost,
            realized_pl=holding.realized_pl,
            total_dividends=holding.total_dividends,
            current_price=holding.current_price,
            market_value=holding.market_value,
            unrealized_pl=holding.unrealized_pl,
            first_purchase_date=holding.first_purchase_date,
            last_trade_date=holding.last_trade_date,
            lots=[
                LotSchema(
                    units=lot.units,
                    cost_per_unit=lot.cost_per_unit,
                    acquisition_date=lot.acquisition_date,
                )
                for lot in holding.lots
            ],
        )


class HoldingsResponse(BaseModel):
    holdings: list[HoldingSchema]
    total_value: float
    skipped_rows: int = 0


class MetricsRequest(PortfolioRequest):
    valuations: list[ValuationPoint] = Field(default_factory=list)
    period: Period = "1Y"
    benchmark_returns: list[float] | None = None
    risk_free_rate: float | None = Field(default=None, description="Overrides the configured rate")


class PositionSummarySchema(BaseModel):
    symbol: str
    market_value: float
    weight_pct: float
    unrealized_return_pct: float
    total_return_pct: float


class AllocationSchema(BaseModel):
    by_market: dict[str, float]
    by_sector: dict[str, float]
    by_currency: dict[str, float]


def _finite_or_none(value: float | None) -> float | None:
    if value is None or not math.isfinite(value):
        return None
    return value


class MetricsResponse(BaseModel):
    period: str
    as_of: date
    total_value: float
    total_cost: float
    unrealized_pl: float
    realized_pl: float
    total_pl: float
    total_dividends: float
    total_return: float
    dividend_yield: float
    volatility: float
    sharpe_ratio: float
    sortino_ratio: float | None = Field(
        default=None, description="Null when no downside deviation exists (unbounded ratio)"
    )
    max_drawdown: float
    var_95: float
    var_99: float
    cagr: float
    beta: float
    allocation: AllocationSchema
    positions: list[PositionSummarySchema]

    @classmethod
    def from_metrics(cls, metrics: PortfolioMetrics) -> "MetricsResponse":
        return cls(
            period=metrics.period,
            as_of=metrics.as_of,
            total_value=metrics.total_value,
            total_cost=metrics.total_cost,
            unrealized_pl=metrics.unrealized_pl,
            realized_pl=metrics.realized_pl,
            total_pl=metrics.total_pl,
            total_dividends=metrics.total_dividends,
            total_return=metrics.total_return,
            dividend_yield=metrics.dividend_yield,
            volatility=metrics.volatility,
            sharpe_ratio=metrics.sharpe_ratio,
            sortino_ratio=_finite_or_none(metrics.sortino_ratio),
            max_drawdown=metrics.max_drawdown,
            var_95=metrics.var_95,
            var_99=metrics.var_99,
            cagr=metrics.cagr,
            beta=metrics.beta,
            allocation=AllocationSchema(
                by_market=metrics.allocation.by_market,
                by_sector=metrics.allocation.by_sector,
                by_currency=metrics.allocation.by_currency,
            ),
            positions=[
                PositionSummarySchema(
                    symbol=p.symbol,
                    market_value=p.market_value,
                    weight_pct=p.weight_pct,
                    unrealized_return_pct=p.unrealized_return_pct,
                    total_return_pct=p.total_return_pct,
                )
                for p in metrics.positions
            ],
        )


class CorrelationRequest(PortfolioRequest):
    price_history: dict[str, dict[date, float]] = Field(
        ..., description="Per-symbol closing prices keyed by ISO date"
    )


class CorrelationPairSchema(BaseModel):
    symbol_a: str
    symbol_b: str
    correlation: float


class CorrelationResponse(BaseModel):
    pairs: list[CorrelationPairSchema]


class FXRatePoint(BaseModel):
    date: date
    from_currency: str = Field(..., min_length=3, max_length=3)
    to_currency: str = Field(..., min_length=3, max_length=3)
    rate: Decimal = Field(..., gt=0)


class TaxRequest(PortfolioRequest):
    year: int | None = Field(default=None, ge=1900, le=2200)
    fx_rates: list[FXRatePoint] = Field(default_factory=list)


class TaxResponse(BaseModel):
    year: int
    currency: str
    domestic_dividends: Decimal
    domestic_gains: Decimal
    foreign_dividends: Decimal
    foreign_dividends_withheld: Decimal
    foreign_gains: Decimal
    crypto_gains: Decimal
    total_tax_owed: Decimal

    @classmethod
    def from_summary(cls, summary: TaxSummary) -> "TaxResponse":
        return cls(
            year=summary.year,
            currency=summary.currency,
            domestic_dividends=summary.domestic_dividends,
            domestic_gains=summary.domestic_gains,
            foreign_dividends=summary.foreign_dividends,
            foreign_dividends_withheld=summary.foreign_dividends_withheld,
            foreign_gains=summary.foreign_gains,
            crypto_gains=summary.crypto_gains,
            total_tax_owed=summary.total_tax_owed,
        )


__all__ = [
    "CorrelationPairSchema",
    "CorrelationRequest",
    "CorrelationResponse",
    "FXRatePoint",
    "HoldingSchema",
    "HoldingsResponse",
    "LotSchema",
    "MetricsRequest",
    "MetricsResponse",
    "Period",
    "PortfolioRequest",
    "TaxRequest",
    "TaxResponse",
    "ValuationPoint",
]
