"""Pairwise return correlation between held symbols."""
from __future__ import annotations

import logging
import math
from datetime import date
from itertools import combinations
from typing import Dict, Mapping, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

MIN_OVERLAPPING_RETURNS = 2


def aligned_returns(price_history: Mapping[str, Mapping[date, float]]) -> pd.DataFrame:
    """Daily returns per symbol, one column each, indexed by date.

    Each symbol's returns come from its own quote calendar, so a gap in one
    series never removes a return from another. Non-positive prices are
    treated as missing quotes.
    """

    columns = {}
    for symbol, series in price_history.items():
        prices = pd.Series(dict(series), dtype=float).sort_index()
        prices = prices.where(prices > 0).dropna()
        columns[symbol] = prices.pct_change(fill_method=None).dropna()
    frame = pd.DataFrame(columns)
    if frame.empty:
        return frame
    return frame.sort_index()


def correlation_matrix(
    price_history: Mapping[str, Mapping[date, float]],
) -> Dict[Tuple[str, str], float]:
    """Pearson correlation of aligned daily returns for every unordered pair.

    Keys follow the order in which symbols appear in ``price_history``.
    Pairs without enough overlapping returns, or with a constant series,
    map to ``0.0``.
    """

    symbols = list(price_history)
    returns = aligned_returns(price_history)
    correlations: Dict[Tuple[str, str], float] = {}
    for first, second in combinations(symbols, 2):
        pair = returns[[first, second]].dropna()
        if len(pair) < MIN_OVERLAPPING_RETURNS:
            correlations[(first, second)] = 0.0
            continue
        value = float(pair[first].corr(pair[second]))
        correlations[(first, second)] = 0.0 if math.isnan(value) else value
    logger.debug("Computed %d pairwise correlations", len(correlations))
    return correlations


__all__ = ["aligned_returns", "correlation_matrix"]
