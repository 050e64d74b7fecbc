"""Monte Carlo projection of portfolio value from historical daily returns."""
from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from .models import MonteCarloPercentiles, MonteCarloResult
from .risk import daily_volatility

logger = logging.getLogger(__name__)

MIN_HISTORY_RETURNS = 50
PERCENTILES = (0.05, 0.25, 0.50, 0.75, 0.95)


def _box_muller(rng: np.random.Generator, shape: tuple[int, int]) -> np.ndarray:
    """Standard normal shocks from two independent uniform draws."""

    # 1 - U keeps the draw in (0, 1] so the log is finite.
    u1 = 1.0 - rng.random(shape)
    u2 = rng.random(shape)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * math.pi * u2)


def _percentile(ordered: Sequence[float], fraction: float) -> float:
    index = min(int(math.floor(len(ordered) * fraction)), len(ordered) - 1)
    return float(ordered[index])


def run_monte_carlo(
    returns: Sequence[float],
    current_value: float,
    scenarios: int = 1000,
    time_horizon: int = 252,
    *,
    min_history: int = MIN_HISTORY_RETURNS,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> MonteCarloResult | None:
    """Simulate ``scenarios`` compounding paths of ``time_horizon`` days.

    Daily shocks are i.i.d. Gaussian with the sample mean and volatility of
    ``returns``. Returns ``None`` when fewer than ``min_history`` returns are
    available.
    """

    if scenarios <= 0:
        raise ValueError("scenarios must be positive")
    if time_horizon <= 0:
        raise ValueError("time_horizon must be positive")
    if len(returns) < min_history:
        logger.info(
            "Monte Carlo skipped: %d returns available, %d required", len(returns), min_history
        )
        return None

    mean = float(np.mean(np.asarray(returns, dtype=float)))
    volatility = daily_volatility(returns)
    generator = rng if rng is not None else np.random.default_rng(seed)

    shocks = _box_muller(generator, (scenarios, time_horizon))
    growth = np.prod(1.0 + mean + volatility * shocks, axis=1)
    terminal = np.sort(current_value * growth)
    ordered = terminal.tolist()

    p5, p25, p50, p75, p95 = (_percentile(ordered, fraction) for fraction in PERCENTILES)
    probability_of_loss = float(np.count_nonzero(terminal < current_value)) / scenarios
    return MonteCarloResult(
        current_value=float(current_value),
        scenarios=ordered,
        percentiles=MonteCarloPercentiles(p5=p5, p25=p25, p50=p50, p75=p75, p95=p95),
        probability_of_loss=probability_of_loss,
    )


__all__ = ["MIN_HISTORY_RETURNS", "run_monte_carlo"]
