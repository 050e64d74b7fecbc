"""Monte Carlo projection tests."""

from __future__ import annotations

import math

import numpy as np
import pytest

from folio_analytics import run_monte_carlo


def _history(n=120, seed=3):
    rng = np.random.default_rng(seed)
    return list(rng.normal(0.0005, 0.01, n))


def test_short_history_returns_none():
    assert run_monte_carlo([0.01] * 49, 10_000.0) is None


@pytest.mark.parametrize(("scenarios", "horizon"), [(0, 10), (10, 0), (-1, 5)])
def test_invalid_sizes_raise(scenarios, horizon):
    with pytest.raises(ValueError):
        run_monte_carlo(_history(), 10_000.0, scenarios, horizon)


def test_seeded_run_is_reproducible_and_sorted():
    first = run_monte_carlo(_history(), 10_000.0, 500, 60, seed=42)
    second = run_monte_carlo(_history(), 10_000.0, 500, 60, seed=42)

    assert first == second
    assert len(first.scenarios) == 500
    assert first.scenarios == sorted(first.scenarios)
    p = first.percentiles
    assert p.p5 <= p.p25 <= p.p50 <= p.p75 <= p.p95
    assert p.p5 == first.scenarios[25]
    assert p.p95 == first.scenarios[475]
    assert 0.0 <= first.probability_of_loss <= 1.0
    assert first.current_value == 10_000.0


def test_zero_volatility_compounds_the_mean():
    result = run_monte_carlo([0.001] * 60, 1000.0, 20, 10, seed=1)

    expected = 1000.0 * 1.001**10
    assert all(value == pytest.approx(expected) for value in result.scenarios)
    assert result.probability_of_loss == 0.0


def test_persistent_losses_always_lose():
    result = run_monte_carlo([-0.002] * 60, 1000.0, 50, 30, seed=7)

    assert result.probability_of_loss == 1.0
    assert result.percentiles.p95 < 1000.0


def test_probability_of_loss_counts_terminal_values_below_start():
    result = run_monte_carlo(_history(seed=11), 5000.0, 400, 120, seed=5)

    below = sum(1 for value in result.scenarios if value < 5000.0)
    assert result.probability_of_loss == pytest.approx(below / 400)
    assert all(math.isfinite(value) for value in result.scenarios)


def test_custom_minimum_history():
    assert run_monte_carlo([0.01] * 10, 100.0, 5, 5, min_history=10, seed=0) is not None
