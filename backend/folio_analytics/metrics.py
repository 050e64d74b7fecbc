"""Portfolio-level metrics assembled from holdings and valuation history."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Mapping, Sequence

from . import risk
from .models import (
    AllocationBreakdown,
    DailyValuation,
    Holding,
    PortfolioMetrics,
    PositionSummary,
)
from .periods import DEFAULT_PERIOD, filter_valuations

logger = logging.getLogger(__name__)

VAR_95_CONFIDENCE = 0.05
VAR_99_CONFIDENCE = 0.01


@dataclass(frozen=True)
class PortfolioTotals:
    total_value: float
    total_cost: float
    unrealized_pl: float
    realized_pl: float
    total_dividends: float

    @property
    def total_pl(self) -> float:
        return self.unrealized_pl + self.realized_pl

    @property
    def total_return(self) -> float:
        return self.total_pl / self.total_cost * 100.0 if self.total_cost > 0 else 0.0

    @property
    def dividend_yield(self) -> float:
        return self.total_dividends / self.total_value * 100.0 if self.total_value > 0 else 0.0


def allocation_breakdown(holdings: Iterable[Holding]) -> AllocationBreakdown:
    """Accumulate market value by market, sector and currency in one pass."""

    by_market: defaultdict[str, float] = defaultdict(float)
    by_sector: defaultdict[str, float] = defaultdict(float)
    by_currency: defaultdict[str, float] = defaultdict(float)
    for holding in holdings:
        value = float(holding.market_value)
        by_market[holding.market] += value
        by_sector[holding.sector] += value
        by_currency[holding.currency] += value
    return AllocationBreakdown(
        by_market=dict(by_market),
        by_sector=dict(by_sector),
        by_currency=dict(by_currency),
    )


def portfolio_totals(holdings: Iterable[Holding]) -> PortfolioTotals:
    total_value = total_cost = unrealized = realized = dividends = 0.0
    for holding in holdings:
        total_value += float(holding.market_value)
        total_cost += float(holding.total_cost)
        unrealized += float(holding.unrealized_pl)
        realized += float(holding.realized_pl)
        dividends += float(holding.total_dividends)
    return PortfolioTotals(
        total_value=total_value,
        total_cost=total_cost,
        unrealized_pl=unrealized,
        realized_pl=realized,
        total_dividends=dividends,
    )


def position_summaries(holdings: Sequence[Holding]) -> List[PositionSummary]:
    """Per-holding weight and return figures, largest position first."""

    total_value = sum(float(h.market_value) for h in holdings)
    summaries: List[PositionSummary] = []
    for holding in holdings:
        value = float(holding.market_value)
        cost = float(holding.total_cost)
        gain = float(holding.unrealized_pl + holding.realized_pl + holding.total_dividends)
        summaries.append(
            PositionSummary(
                symbol=holding.symbol,
                market_value=value,
                weight_pct=value / total_value * 100.0 if total_value > 0 else 0.0,
                unrealized_return_pct=float(holding.unrealized_pl) / cost * 100.0 if cost > 0 else 0.0,
                total_return_pct=gain / cost * 100.0 if cost > 0 else 0.0,
            )
        )
    summaries.sort(key=lambda s: s.market_value, reverse=True)
    return summaries


def compute_metrics(
    holdings: Mapping[str, Holding],
    daily_valuations: Iterable[DailyValuation],
    period: str = DEFAULT_PERIOD,
    risk_free_rate: float = 0.0,
    benchmark_returns: Sequence[float] | None = None,
    *,
    as_of: date | None = None,
) -> PortfolioMetrics:
    """Compute aggregate P&L, allocation and time-series risk for ``period``."""

    as_of = as_of or date.today()
    positions = list(holdings.values())
    totals = portfolio_totals(positions)

    series = filter_valuations(daily_valuations, period, as_of)
    returns = risk.returns_from_values([float(v.market_value) for v in series])

    volatility = sharpe = sortino = drawdown = var_95 = var_99 = growth = beta = 0.0
    if returns:
        volatility = risk.annualized_volatility(returns)
        sharpe = risk.sharpe_ratio(returns, risk_free_rate)
        sortino = risk.sortino_ratio(returns, risk_free_rate)
        drawdown = risk.max_drawdown([float(v.market_value) for v in series])
        var_95 = risk.value_at_risk(returns, VAR_95_CONFIDENCE) * totals.total_value
        var_99 = risk.value_at_risk(returns, VAR_99_CONFIDENCE) * totals.total_value
        growth = risk.cagr(series)
        if benchmark_returns is not None:
            beta = risk.beta(returns, benchmark_returns)
    else:
        logger.debug("No returns in %s window; time-series metrics left at zero", period)

    return PortfolioMetrics(
        period=period,
        as_of=as_of,
        total_value=totals.total_value,
        total_cost=totals.total_cost,
        unrealized_pl=totals.unrealized_pl,
        realized_pl=totals.realized_pl,
        total_pl=totals.total_pl,
        total_dividends=totals.total_dividends,
        total_return=totals.total_return,
        dividend_yield=totals.dividend_yield,
        volatility=volatility,
        sharpe_ratio=sharpe,
        sortino_ratio=sortino,
        max_drawdown=drawdown,
        var_95=var_95,
        var_99=var_99,
        cagr=growth,
        beta=beta,
        allocation=allocation_breakdown(positions),
        positions=position_summaries(positions),
    )


__all__ = [
    "PortfolioTotals",
    "allocation_breakdown",
    "compute_metrics",
    "portfolio_totals",
    "position_summaries",
]
