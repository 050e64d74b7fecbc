"""Domain models used by the portfolio ledger and risk engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

ZERO = Decimal("0")


class TransactionType(str, Enum):
    """Ledger entry kinds, valued with the tags used by the source sheet."""

    BUY = "Buy"
    SELL = "Sell"
    DIVIDEND = "Div"
    SPLIT = "Split"
    CAPITAL_REDUCTION = "CapReduct"

    @classmethod
    def parse(cls, value: str) -> "TransactionType":
        """Resolve a raw tag (canonical or alias, any case) to a member."""

        key = value.strip().lower().replace("_", "").replace(" ", "")
        if key not in _TYPE_ALIASES:
            raise ValueError(f"Unknown transaction type: {value!r}")
        return _TYPE_ALIASES[key]


_TYPE_ALIASES: Dict[str, TransactionType] = {
    "buy": TransactionType.BUY,
    "sell": TransactionType.SELL,
    "div": TransactionType.DIVIDEND,
    "dividend": TransactionType.DIVIDEND,
    "split": TransactionType.SPLIT,
    "capreduct": TransactionType.CAPITAL_REDUCTION,
    "capitalreduction": TransactionType.CAPITAL_REDUCTION,
}


class Market(str, Enum):
    US = "US"
    PL = "PL"
    CRYPTO = "CRYPTO"
    PHYSICAL = "PHYSICAL"


@dataclass(frozen=True)
class Transaction:
    """A normalized ledger entry."""

    date: date
    type: TransactionType
    market: str
    symbol: str
    units: Decimal
    price: Decimal
    fees: Decimal = ZERO
    split_ratio: Decimal = Decimal("1")
    currency: str = "USD"

    @property
    def notional(self) -> Decimal:
        return self.units * self.price


@dataclass
class Lot:
    """An open FIFO parcel created by a buy."""

    units: Decimal
    cost_per_unit: Decimal
    acquisition_date: date

    @property
    def cost_total(self) -> Decimal:
        return self.units * self.cost_per_unit


@dataclass
class Holding:
    """Aggregated position for one symbol."""

    symbol: str
    market: str
    currency: str
    sector: str = "Unknown"
    units: Decimal = ZERO
    total_cost: Decimal = ZERO
    average_cost: Decimal = ZERO
    realized_pl: Decimal = ZERO
    total_dividends: Decimal = ZERO
    current_price: Decimal = ZERO
    market_value: Decimal = ZERO
    unrealized_pl: Decimal = ZERO
    first_purchase_date: Optional[date] = None
    last_trade_date: Optional[date] = None
    lots: List[Lot] = field(default_factory=list)


@dataclass(frozen=True)
class RealizedTrade:
    """A sale matched against FIFO lots."""

    date: date
    symbol: str
    market: str
    currency: str
    units: Decimal
    proceeds: Decimal
    cost: Decimal
    realized_pl: Decimal
    unmatched_units: Decimal = ZERO


@dataclass
class LedgerReplay:
    """Output of one replay pass over the ledger."""

    holdings: Dict[str, Holding]
    realized_trades: List[RealizedTrade]


@dataclass(frozen=True)
class DailyValuation:
    """Total portfolio market value on one day."""

    date: date
    market_value: float


@dataclass(frozen=True)
class AllocationBreakdown:
    """Market value aggregated by market, sector and currency."""

    by_market: Dict[str, float] = field(default_factory=dict)
    by_sector: Dict[str, float] = field(default_factory=dict)
    by_currency: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class PositionSummary:
    symbol: str
    market_value: float
    weight_pct: float
    unrealized_return_pct: float
    total_return_pct: float


@dataclass(frozen=True)
class PortfolioMetrics:
    """Risk and performance snapshot for one lookback period."""

    period: str
    as_of: date
    total_value: float = 0.0
    total_cost: float = 0.0
    unrealized_pl: float = 0.0
    realized_pl: float = 0.0
    total_pl: float = 0.0
    total_dividends: float = 0.0
    total_return: float = 0.0
    dividend_yield: float = 0.0
    volatility: float = 0.0
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    max_drawdown: float = 0.0
    var_95: float = 0.0
    var_99: float = 0.0
    cagr: float = 0.0
    beta: float = 0.0
    allocation: AllocationBreakdown = field(default_factory=AllocationBreakdown)
    positions: List[PositionSummary] = field(default_factory=list)


@dataclass(frozen=True)
class MonteCarloPercentiles:
    p5: float
    p25: float
    p50: float
    p75: float
    p95: float


@dataclass(frozen=True)
class MonteCarloResult:
    current_value: float
    scenarios: List[float]
    percentiles: MonteCarloPercentiles
    probability_of_loss: float


@dataclass(frozen=True)
class TaxSummary:
    """Yearly tax liability split by market and income kind."""

    year: int
    currency: str
    domestic_dividends: Decimal = ZERO
    domestic_gains: Decimal = ZERO
    foreign_dividends: Decimal = ZERO
    foreign_dividends_withheld: Decimal = ZERO
    foreign_gains: Decimal = ZERO
    crypto_gains: Decimal = ZERO
    total_tax_owed: Decimal = ZERO
