"""FX conversion helpers for reporting in a single currency."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Tuple


@dataclass
class FXRateProvider:
    """Look up daily conversion rates supplied by the caller.

    ``rates`` maps ``(date, from_currency, to_currency)`` to a rate. When no
    rate exists for the exact date, the most recent earlier rate is used
    (weekends and bank holidays have no fixing).
    """

    rates: Dict[Tuple[date, str, str], Decimal]
    base_currency: str = "PLN"
    _by_pair: Dict[Tuple[str, str], List[Tuple[date, Decimal]]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for (day, source, target), value in self.rates.items():
            pair = (source.upper(), target.upper())
            self._by_pair.setdefault(pair, []).append((day, Decimal(str(value))))
        for series in self._by_pair.values():
            series.sort()

    def rate(self, d: date, from_currency: str, to_currency: str | None = None) -> Decimal:
        """Return the conversion rate from ``from_currency`` to ``to_currency``."""

        target = (to_currency or self.base_currency).upper()
        source = from_currency.upper()
        if source == target:
            return Decimal("1")
        series = self._by_pair.get((source, target), [])
        previous = [value for day, value in series if day <= d]
        if not previous:
            raise KeyError(f"Missing FX rate for {source}->{target} on {d.isoformat()}")
        return previous[-1]

    def convert(self, amount: Decimal, d: date, from_currency: str, to_currency: str | None = None) -> Decimal:
        return amount * self.rate(d, from_currency, to_currency)


__all__ = ["FXRateProvider"]
