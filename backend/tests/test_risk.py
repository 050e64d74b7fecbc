"""Return-series statistics and period filtering."""

from __future__ import annotations

import math
import random
from datetime import date, timedelta

import numpy as np
import pytest

from folio_analytics import risk
from folio_analytics.models import DailyValuation
from folio_analytics.periods import filter_valuations, in_period, period_window


def _series(start: date, values):
    return [DailyValuation(date=start + timedelta(days=i), market_value=v) for i, v in enumerate(values)]


def test_constant_returns_have_no_dispersion():
    returns = [0.01] * 20

    assert risk.daily_volatility(returns) == 0.0
    assert risk.annualized_volatility(returns) == 0.0
    assert risk.sharpe_ratio(returns, 0.0) == 0.0
    assert risk.sortino_ratio(returns, 0.0) == math.inf


def test_compounded_constant_growth_is_treated_as_constant():
    values = [100.0 * 1.01**i for i in range(30)]
    returns = risk.returns_from_values(values)

    assert risk.daily_volatility(returns) == 0.0
    assert risk.sortino_ratio(returns, 0.0) == math.inf


def test_volatility_and_sharpe_match_sample_statistics():
    returns = [0.01, -0.02, 0.015, 0.003, -0.007, 0.012]
    std = float(np.std(returns, ddof=1))
    mean = float(np.mean(returns))

    assert risk.annualized_volatility(returns) == pytest.approx(std * math.sqrt(252) * 100)
    assert risk.sharpe_ratio(returns, 0.05) == pytest.approx((mean - 0.05 / 252) / std * math.sqrt(252))


def test_sortino_uses_below_mean_deviation():
    returns = [0.02, -0.01, 0.02, -0.01]
    mean = 0.005
    downside = math.sqrt(((-0.015) ** 2 + (-0.015) ** 2) / 2)

    assert risk.sortino_ratio(returns, 0.0) == pytest.approx(mean / downside * math.sqrt(252))


def test_max_drawdown():
    assert risk.max_drawdown([100, 110, 120, 130]) == 0.0
    assert risk.max_drawdown([100, 80, 120]) == pytest.approx(20.0)
    assert risk.max_drawdown([100, 120, 60, 150, 90]) == pytest.approx(50.0)
    assert risk.max_drawdown([100]) == 0.0


def test_value_at_risk_picks_floor_index():
    returns = [i / 100 for i in range(-10, 10)]
    random.Random(7).shuffle(returns)

    assert risk.value_at_risk(returns, 0.05) == pytest.approx(-0.09)
    assert risk.value_at_risk(returns, 0.01) == pytest.approx(-0.10)


def test_value_at_risk_needs_ten_observations():
    assert risk.value_at_risk([-0.5] * 9, 0.05) == 0.0


def test_cagr_over_one_year():
    valuations = [
        DailyValuation(date=date(2023, 1, 1), market_value=100_000.0),
        DailyValuation(date=date(2024, 1, 1), market_value=121_000.0),
    ]

    assert risk.cagr(valuations) == pytest.approx(21.0, abs=0.05)


def test_cagr_degenerate_inputs():
    assert risk.cagr([DailyValuation(date=date(2024, 1, 1), market_value=1.0)]) == 0.0
    same_day = [
        DailyValuation(date=date(2024, 1, 1), market_value=1.0),
        DailyValuation(date=date(2024, 1, 1), market_value=2.0),
    ]
    assert risk.cagr(same_day) == 0.0


def test_beta_against_scaled_benchmark():
    benchmark = [0.01, -0.005, 0.002, 0.008, -0.012, 0.004, 0.006, -0.003, 0.009, -0.001, 0.003]
    portfolio = [2 * r for r in benchmark]

    assert risk.beta(portfolio, benchmark) == pytest.approx(2.0)
    assert risk.beta(portfolio[:-1], benchmark) == 0.0
    assert risk.beta(portfolio[:5], benchmark[:5]) == 0.0


def test_returns_skip_non_positive_bases():
    assert risk.returns_from_values([0.0, 100.0, 110.0]) == pytest.approx([0.1])


def test_period_window_boundaries():
    as_of = date(2024, 6, 30)

    assert in_period(as_of - timedelta(days=30), "1M", as_of)
    assert not in_period(as_of - timedelta(days=31), "1M", as_of)
    assert in_period(date(1990, 1, 1), "ALL", as_of)
    assert period_window("bogus") == 365


def test_daily_returns_follow_period_and_sort_order():
    start = date(2024, 1, 1)
    valuations = _series(start, [100.0, 50.0, 100.0, 110.0])
    as_of = start + timedelta(days=3)

    assert [v.market_value for v in filter_valuations(reversed(valuations), "ALL", as_of)] == [100.0, 50.0, 100.0, 110.0]
    returns = risk.daily_returns(valuations, "1M", as_of)
    assert returns == pytest.approx([-0.5, 1.0, 0.1])
    short = risk.daily_returns(_series(as_of - timedelta(days=40), [100.0] * 10 + [200.0] * 31), "1M", as_of)
    assert all(r == 0.0 for r in short)
