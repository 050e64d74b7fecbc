"""Position accounting and risk analytics for transaction-ledger portfolios."""

from .context import AnalyticsConfig, AnalyticsContext
from .ingest import parse_transaction_rows
from .ledger import build_holdings, mark_to_market, replay_transactions
from .metrics import compute_metrics
from .models import (
    DailyValuation,
    Holding,
    Lot,
    MonteCarloResult,
    PortfolioMetrics,
    RealizedTrade,
    TaxSummary,
    Transaction,
    TransactionType,
)
from .montecarlo import run_monte_carlo
from .correlation import correlation_matrix

__all__ = [
    "AnalyticsConfig",
    "AnalyticsContext",
    "DailyValuation",
    "Holding",
    "Lot",
    "MonteCarloResult",
    "PortfolioMetrics",
    "RealizedTrade",
    "TaxSummary",
    "Transaction",
    "TransactionType",
    "build_holdings",
    "compute_metrics",
    "correlation_matrix",
    "mark_to_market",
    "parse_transaction_rows",
    "replay_transactions",
    "run_monte_carlo",
]
