"""FIFO position ledger: replays transactions into holdings."""
from __future__ import annotations

import logging
from collections import deque
from decimal import Decimal
from typing import Deque, Dict, Iterable, List, Mapping, Sequence

from .models import (
    ZERO,
    Holding,
    LedgerReplay,
    Lot,
    RealizedTrade,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)


def _group_by_symbol(transactions: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    grouped: Dict[str, List[Transaction]] = {}
    for tx in transactions:
        grouped.setdefault(tx.symbol, []).append(tx)
    return grouped


def _consume_lots(lots: Deque[Lot], quantity: Decimal) -> tuple[Decimal, Decimal]:
    """Remove ``quantity`` units oldest-first; return (matched units, cost)."""

    remaining = quantity
    cost_removed = ZERO
    while remaining > 0 and lots:
        lot = lots[0]
        take = min(remaining, lot.units)
        cost_removed += take * lot.cost_per_unit
        lot.units -= take
        remaining -= take
        if lot.units <= 0:
            lots.popleft()
    return quantity - remaining, cost_removed


def _replay_symbol(
    symbol: str,
    transactions: Sequence[Transaction],
    sectors: Mapping[str, str],
    trades: List[RealizedTrade],
) -> Holding:
    ordered = sorted(transactions, key=lambda t: t.date)
    last = ordered[-1]
    holding = Holding(
        symbol=symbol,
        market=last.market,
        currency=last.currency,
        sector=sectors.get(symbol, "Unknown"),
    )
    lots: Deque[Lot] = deque()

    for tx in ordered:
        if tx.type is TransactionType.BUY:
            lots.append(Lot(units=tx.units, cost_per_unit=tx.price, acquisition_date=tx.date))
            holding.units += tx.units
            holding.total_cost += tx.units * tx.price + tx.fees
            if holding.first_purchase_date is None:
                holding.first_purchase_date = tx.date
            holding.last_trade_date = tx.date
        elif tx.type is TransactionType.SELL:
            matched, sell_cost = _consume_lots(lots, tx.units)
            unmatched = tx.units - matched
            if unmatched > 0:
                logger.warning(
                    "Sell of %s %s on %s exceeds open units by %s; excess ignored",
                    tx.units,
                    symbol,
                    tx.date.isoformat(),
                    unmatched,
                )
            proceeds = matched * tx.price - tx.fees
            realized = proceeds - sell_cost
            holding.realized_pl += realized
            holding.units -= matched
            holding.total_cost -= sell_cost
            holding.last_trade_date = tx.date
            trades.append(
                RealizedTrade(
                    date=tx.date,
                    symbol=symbol,
                    market=tx.market,
                    currency=tx.currency,
                    units=matched,
                    proceeds=proceeds,
                    cost=sell_cost,
                    realized_pl=realized,
                    unmatched_units=unmatched,
                )
            )
        elif tx.type is TransactionType.DIVIDEND:
            holding.total_dividends += tx.units * tx.price
        elif tx.type is TransactionType.SPLIT:
            for lot in lots:
                lot.units *= tx.split_ratio
                lot.cost_per_unit /= tx.split_ratio
            holding.units *= tx.split_ratio
        elif tx.type is TransactionType.CAPITAL_REDUCTION:
            reduction = tx.units * tx.price
            holding.total_cost -= reduction
            holding.total_dividends += reduction
        else:  # pragma: no cover - enum is closed
            raise ValueError(f"Unhandled transaction type {tx.type!r}")

    holding.average_cost = holding.total_cost / holding.units if holding.units > 0 else ZERO
    holding.lots = list(lots)
    return holding


def replay_transactions(
    transactions: Iterable[Transaction],
    sectors: Mapping[str, str] | None = None,
) -> LedgerReplay:
    """Replay the ledger and return open holdings plus every realized sale."""

    sectors = sectors or {}
    trades: List[RealizedTrade] = []
    holdings: Dict[str, Holding] = {}
    for symbol, symbol_transactions in _group_by_symbol(transactions).items():
        holding = _replay_symbol(symbol, symbol_transactions, sectors, trades)
        if holding.units > 0:
            holdings[symbol] = holding
        else:
            logger.debug("Dropping liquidated position %s (realized %s)", symbol, holding.realized_pl)
    trades.sort(key=lambda trade: trade.date)
    return LedgerReplay(holdings=holdings, realized_trades=trades)


def build_holdings(
    transactions: Iterable[Transaction],
    sectors: Mapping[str, str] | None = None,
) -> Dict[str, Holding]:
    """Return the open holdings keyed by symbol."""

    return replay_transactions(transactions, sectors).holdings


def mark_to_market(holdings: Mapping[str, Holding], prices: Mapping[str, float | Decimal]) -> Decimal:
    """Apply current quotes to holdings and return the total market value."""

    for symbol, holding in holdings.items():
        if symbol not in prices:
            continue
        price = Decimal(str(prices[symbol]))
        holding.current_price = price
        holding.market_value = holding.units * price
        holding.unrealized_pl = holding.market_value - holding.total_cost
    return sum((holding.market_value for holding in holdings.values()), ZERO)


__all__ = ["build_holdings", "mark_to_market", "replay_transactions"]
