"""Lookback period tags and valuation filtering."""
from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional

from .models import DailyValuation

PERIOD_WINDOWS: Dict[str, Optional[int]] = {
    "1M": 30,
    "3M": 90,
    "6M": 180,
    "1Y": 365,
    "3Y": 1095,
    "5Y": 1825,
    "ALL": None,
}
DEFAULT_PERIOD = "1Y"


def period_window(period: str) -> Optional[int]:
    """Return the inclusive day window for ``period``; ``None`` means unbounded.

    Unrecognized tags fall back to the one-year window.
    """

    if period in PERIOD_WINDOWS:
        return PERIOD_WINDOWS[period]
    return PERIOD_WINDOWS[DEFAULT_PERIOD]


def in_period(day: date, period: str, as_of: date) -> bool:
    window = period_window(period)
    if window is None:
        return True
    return (as_of - day).days <= window


def filter_valuations(
    valuations: Iterable[DailyValuation],
    period: str,
    as_of: date | None = None,
) -> List[DailyValuation]:
    """Keep valuations inside the lookback window, sorted by date."""

    as_of = as_of or date.today()
    selected = [v for v in valuations if in_period(v.date, period, as_of)]
    return sorted(selected, key=lambda v: v.date)


__all__ = ["DEFAULT_PERIOD", "PERIOD_WINDOWS", "filter_valuations", "in_period", "period_window"]
