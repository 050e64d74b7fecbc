"""Return-series statistics: volatility, risk-adjusted ratios, drawdown, VaR.

All routines are pure functions over plain sequences. Degenerate inputs
(too few observations, zero variance, non-positive values) resolve to ``0.0``
instead of raising; the Sortino ratio is ``inf`` when no return falls below
the mean.
"""
from __future__ import annotations

import math
from datetime import date
from typing import Iterable, List, Sequence

import numpy as np

from .models import DailyValuation
from .periods import filter_valuations

TRADING_DAYS = 252
DAYS_PER_YEAR = 365.25
MIN_VAR_OBSERVATIONS = 10
MIN_BETA_OBSERVATIONS = 10
# Below this a dispersion is treated as zero.
EPS = 1e-12


def returns_from_values(values: Sequence[float]) -> List[float]:
    """Simple returns between consecutive values, skipping non-positive bases."""

    returns: List[float] = []
    for previous, current in zip(values, values[1:]):
        if previous > 0:
            returns.append((current - previous) / previous)
    return returns


def daily_returns(
    valuations: Iterable[DailyValuation],
    period: str,
    as_of: date | None = None,
) -> List[float]:
    """Daily returns of the valuation series restricted to ``period``."""

    filtered = filter_valuations(valuations, period, as_of)
    return returns_from_values([float(v.market_value) for v in filtered])


def benchmark_returns(
    prices: Iterable[DailyValuation],
    period: str,
    as_of: date | None = None,
) -> List[float]:
    """Daily returns of a benchmark price series over the same window."""

    return daily_returns(prices, period, as_of)


def daily_volatility(returns: Sequence[float]) -> float:
    """Sample standard deviation of returns (not annualized)."""

    if len(returns) < 2:
        return 0.0
    std = float(np.std(np.asarray(returns, dtype=float), ddof=1))
    return std if std > EPS else 0.0


def annualized_volatility(returns: Sequence[float]) -> float:
    """Annualized volatility as a percentage."""

    return daily_volatility(returns) * math.sqrt(TRADING_DAYS) * 100.0


def sharpe_ratio(returns: Sequence[float], risk_free_rate: float) -> float:
    if len(returns) < 2:
        return 0.0
    volatility = daily_volatility(returns)
    if volatility == 0:
        return 0.0
    mean = float(np.mean(returns))
    return (mean - risk_free_rate / TRADING_DAYS) / volatility * math.sqrt(TRADING_DAYS)


def sortino_ratio(returns: Sequence[float], risk_free_rate: float) -> float:
    """Sortino ratio using the population deviation of below-mean returns."""

    if len(returns) < 2:
        return 0.0
    arr = np.asarray(returns, dtype=float)
    mean = float(arr.mean())
    deviations = arr - mean
    downside = deviations[deviations < -EPS]
    if downside.size == 0:
        return math.inf
    downside_deviation = float(np.sqrt(np.mean(downside**2)))
    if downside_deviation <= EPS:
        return 0.0
    return (mean - risk_free_rate / TRADING_DAYS) / downside_deviation * math.sqrt(TRADING_DAYS)


def max_drawdown(values: Sequence[float]) -> float:
    """Largest peak-to-trough decline of a value series, as a percentage."""

    if len(values) < 2:
        return 0.0
    worst = 0.0
    peak = values[0]
    for value in values:
        if value > peak:
            peak = value
        if peak <= 0:
            continue
        drawdown = (peak - value) / peak
        if drawdown > worst:
            worst = drawdown
    return worst * 100.0


def value_at_risk(returns: Sequence[float], confidence: float) -> float:
    """Historical VaR: the return at ``floor(confidence * N)`` of sorted returns."""

    if len(returns) < MIN_VAR_OBSERVATIONS:
        return 0.0
    ordered = sorted(returns)
    index = min(int(math.floor(confidence * len(ordered))), len(ordered) - 1)
    return float(ordered[index])


def cagr(valuations: Sequence[DailyValuation]) -> float:
    """Compound annual growth between the first and last valuation, in percent."""

    if len(valuations) < 2:
        return 0.0
    first, last = valuations[0], valuations[-1]
    years = (last.date - first.date).days / DAYS_PER_YEAR
    start_value = float(first.market_value)
    if years <= 0 or start_value <= 0:
        return 0.0
    return ((float(last.market_value) / start_value) ** (1 / years) - 1) * 100.0


def beta(portfolio_returns: Sequence[float], benchmark: Sequence[float]) -> float:
    """Sample covariance with the benchmark over the benchmark's sample variance."""

    if len(portfolio_returns) != len(benchmark) or len(portfolio_returns) < MIN_BETA_OBSERVATIONS:
        return 0.0
    portfolio = np.asarray(portfolio_returns, dtype=float)
    bench = np.asarray(benchmark, dtype=float)
    variance = float(np.var(bench, ddof=1))
    if variance <= EPS:
        return 0.0
    covariance = float(np.cov(portfolio, bench, ddof=1)[0, 1])
    return covariance / variance


__all__ = [
    "TRADING_DAYS",
    "annualized_volatility",
    "benchmark_returns",
    "beta",
    "cagr",
    "daily_returns",
    "daily_volatility",
    "max_drawdown",
    "returns_from_values",
    "sharpe_ratio",
    "sortino_ratio",
    "value_at_risk",
]
