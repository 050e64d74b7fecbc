"""Tabular export of holdings."""
from __future__ import annotations

from typing import Iterable

import pandas as pd

from .models import Holding

COLUMNS = [
    "Symbol",
    "Market",
    "Units",
    "Current Price",
    "Market Value",
    "Cost Basis",
    "Unrealized P&L",
    "Realized P&L",
    "Dividends",
]


def holdings_frame(holdings: Iterable[Holding]) -> pd.DataFrame:
    records = [
        [
            h.symbol,
            h.market,
            float(h.units),
            float(h.current_price),
            float(h.market_value),
            float(h.total_cost),
            float(h.unrealized_pl),
            float(h.realized_pl),
            float(h.total_dividends),
        ]
        for h in holdings
    ]
    return pd.DataFrame.from_records(records, columns=COLUMNS)


def holdings_csv(holdings: Iterable[Holding]) -> str:
    return holdings_frame(holdings).to_csv(index=False)


__all__ = ["COLUMNS", "holdings_csv", "holdings_frame"]
