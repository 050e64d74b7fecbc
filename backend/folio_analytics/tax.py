"""Yearly tax liability derived from the ledger.

Dividends come straight from dividend transactions; capital gains come from
the FIFO-matched sales recorded during the ledger replay, so gains on fully
liquidated positions are included. Gains are netted per category within the
year and floored at zero before rates are applied.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from .fx import FXRateProvider
from .models import ZERO, Market, RealizedTrade, TaxSummary, Transaction, TransactionType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxRates:
    """Flat rates per income category (defaults follow Polish tax law)."""

    domestic_dividend: Decimal = Decimal("0.19")
    domestic_capital_gains: Decimal = Decimal("0.19")
    foreign_dividend_withheld: Decimal = Decimal("0.15")
    foreign_dividend_supplemental: Decimal = Decimal("0.04")
    foreign_capital_gains: Decimal = Decimal("0.19")
    crypto_capital_gains: Decimal = Decimal("0.19")


def _to_reporting(
    amount: Decimal,
    day: date,
    currency: str,
    fx_provider: FXRateProvider | None,
    reporting_currency: str,
) -> Decimal:
    if fx_provider is None:
        return amount
    return fx_provider.convert(amount, day, currency, reporting_currency)


def compute_tax_liability(
    transactions: Iterable[Transaction],
    realized_trades: Iterable[RealizedTrade],
    year: int | None = None,
    *,
    rates: TaxRates | None = None,
    fx_provider: FXRateProvider | None = None,
    reporting_currency: str = "PLN",
) -> TaxSummary:
    """Summarize dividends, gains and tax owed for one calendar year."""

    year = year or date.today().year
    rates = rates or TaxRates()

    domestic_dividends = foreign_dividends = ZERO
    for tx in transactions:
        if tx.date.year != year or tx.type is not TransactionType.DIVIDEND:
            continue
        amount = _to_reporting(tx.notional, tx.date, tx.currency, fx_provider, reporting_currency)
        if tx.market == Market.PL.value:
            domestic_dividends += amount
        elif tx.market == Market.US.value:
            foreign_dividends += amount

    domestic_net = foreign_net = crypto_net = ZERO
    for trade in realized_trades:
        if trade.date.year != year:
            continue
        amount = _to_reporting(trade.realized_pl, trade.date, trade.currency, fx_provider, reporting_currency)
        if trade.market == Market.PL.value:
            domestic_net += amount
        elif trade.market == Market.US.value:
            foreign_net += amount
        elif trade.market == Market.CRYPTO.value:
            crypto_net += amount

    domestic_gains = max(ZERO, domestic_net)
    foreign_gains = max(ZERO, foreign_net)
    crypto_gains = max(ZERO, crypto_net)

    total = (
        domestic_dividends * rates.domestic_dividend
        + domestic_gains * rates.domestic_capital_gains
        + foreign_dividends * rates.foreign_dividend_supplemental
        + foreign_gains * rates.foreign_capital_gains
        + crypto_gains * rates.crypto_capital_gains
    )
    logger.debug("Tax liability for %d: %s %s", year, total, reporting_currency)
    return TaxSummary(
        year=year,
        currency=reporting_currency if fx_provider is not None else "native",
        domestic_dividends=domestic_dividends,
        domestic_gains=domestic_gains,
        foreign_dividends=foreign_dividends,
        foreign_dividends_withheld=foreign_dividends * rates.foreign_dividend_withheld,
        foreign_gains=foreign_gains,
        crypto_gains=crypto_gains,
        total_tax_owed=total,
    )


__all__ = ["TaxRates", "compute_tax_liability"]
