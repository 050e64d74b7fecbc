"""Caller-owned analytics state: ledger, valuation history and metrics cache."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Sequence, Tuple

from . import risk
from .cache import MetricsCache
from .correlation import correlation_matrix
from .export import holdings_csv
from .fx import FXRateProvider
from .ingest import parse_transaction_rows
from .ledger import mark_to_market, replay_transactions
from .metrics import compute_metrics
from .models import (
    DailyValuation,
    Holding,
    MonteCarloResult,
    PortfolioMetrics,
    RealizedTrade,
    TaxSummary,
    Transaction,
)
from .montecarlo import MIN_HISTORY_RETURNS, run_monte_carlo
from .periods import DEFAULT_PERIOD
from .sectors import DEFAULT_SECTORS
from .tax import TaxRates, compute_tax_liability

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsConfig:
    """Constants the engine needs from its surroundings."""

    risk_free_rate: float = 0.055
    cache_duration: timedelta = timedelta(minutes=5)
    default_period: str = DEFAULT_PERIOD
    reporting_currency: str = "PLN"
    monte_carlo_scenarios: int = 1000
    monte_carlo_horizon: int = 252
    monte_carlo_min_history: int = MIN_HISTORY_RETURNS
    tax_rates: TaxRates = field(default_factory=TaxRates)
    sectors: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SECTORS))


def _metrics_key(period: str, benchmark_returns: Sequence[float] | None, as_of: date | None) -> Hashable:
    if benchmark_returns is None and as_of is None:
        return period
    benchmark = None if benchmark_returns is None else tuple(float(r) for r in benchmark_returns)
    return (period, benchmark, as_of)


class AnalyticsContext:
    """Holds one portfolio's ledger state for the lifetime of a caller.

    Mutating operations (loading transactions, applying prices, recording
    valuations) hold an exclusive lock and drop cached metrics.
    """

    def __init__(
        self,
        config: AnalyticsConfig | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or AnalyticsConfig()
        cache_kwargs: Dict[str, Any] = {"duration": self.config.cache_duration}
        if clock is not None:
            cache_kwargs["clock"] = clock
        self.cache = MetricsCache(**cache_kwargs)
        self.transactions: List[Transaction] = []
        self.holdings: Dict[str, Holding] = {}
        self.realized_trades: List[RealizedTrade] = []
        self._valuations: Dict[date, float] = {}
        self._lock = threading.RLock()

    # Ledger

    def load_transactions(self, rows: Iterable[Mapping[str, Any]]) -> List[Transaction]:
        """Parse raw rows, replace the ledger and rebuild holdings."""

        transactions = parse_transaction_rows(rows)
        with self._lock:
            self.transactions = transactions
            self.rebuild()
        logger.info("Loaded %d transactions into %d open holdings", len(transactions), len(self.holdings))
        return transactions

    def rebuild(self) -> Dict[str, Holding]:
        with self._lock:
            replay = replay_transactions(self.transactions, self.config.sectors)
            self.holdings = replay.holdings
            self.realized_trades = replay.realized_trades
            self.cache.invalidate()
            return self.holdings

    def update_prices(self, prices: Mapping[str, float | Decimal], as_of: date | None = None) -> float:
        """Mark holdings to market and record the day's portfolio value."""

        with self._lock:
            total = float(mark_to_market(self.holdings, prices))
            self.record_valuation(as_of or date.today(), total)
        return total

    # Valuations

    def record_valuation(self, day: date, value: float) -> None:
        """Store the portfolio value for ``day``, replacing any earlier value."""

        with self._lock:
            self._valuations[day] = float(value)
            self.cache.invalidate()

    def record_valuations(self, valuations: Iterable[DailyValuation]) -> None:
        with self._lock:
            for valuation in valuations:
                self._valuations[valuation.date] = float(valuation.market_value)
            self.cache.invalidate()

    @property
    def valuations(self) -> List[DailyValuation]:
        return [DailyValuation(date=d, market_value=v) for d, v in sorted(self._valuations.items())]

    @property
    def total_value(self) -> float:
        return float(sum(h.market_value for h in self.holdings.values()))

    # Analytics

    def metrics(
        self,
        period: str | None = None,
        benchmark_returns: Sequence[float] | None = None,
        *,
        as_of: date | None = None,
    ) -> PortfolioMetrics:
        period = period or self.config.default_period
        key = _metrics_key(period, benchmark_returns, as_of)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        result = compute_metrics(
            self.holdings,
            self.valuations,
            period,
            self.config.risk_free_rate,
            benchmark_returns,
            as_of=as_of,
        )
        self.cache.set(key, result)
        return result

    def monte_carlo(
        self,
        scenarios: int | None = None,
        time_horizon: int | None = None,
        *,
        seed: int | None = None,
        as_of: date | None = None,
    ) -> MonteCarloResult | None:
        returns = risk.daily_returns(self.valuations, "ALL", as_of)
        return run_monte_carlo(
            returns,
            self.total_value,
            self.config.monte_carlo_scenarios if scenarios is None else scenarios,
            self.config.monte_carlo_horizon if time_horizon is None else time_horizon,
            min_history=self.config.monte_carlo_min_history,
            seed=seed,
        )

    def correlation(self, price_history: Mapping[str, Mapping[date, float]]) -> Dict[Tuple[str, str], float]:
        """Correlations between currently held symbols with supplied history."""

        held = {symbol: price_history[symbol] for symbol in self.holdings if symbol in price_history}
        return correlation_matrix(held)

    def tax_liability(self, year: int | None = None, fx_provider: FXRateProvider | None = None) -> TaxSummary:
        return compute_tax_liability(
            self.transactions,
            self.realized_trades,
            year,
            rates=self.config.tax_rates,
            fx_provider=fx_provider,
            reporting_currency=self.config.reporting_currency,
        )

    def export_holdings(self) -> str:
        return holdings_csv(self.holdings.values())


__all__ = ["AnalyticsConfig", "AnalyticsContext"]
