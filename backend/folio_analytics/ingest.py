"""Normalization of raw transaction rows into ledger transactions."""
from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping

import pandas as pd

from .models import Transaction, TransactionType

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("date", "type", "market")


def _first(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def coerce_decimal(value: Any, default: Decimal) -> Decimal:
    """Parse ``value`` as a finite decimal, falling back to ``default``."""

    if value is None:
        return default
    if isinstance(value, Decimal):
        parsed = value
    else:
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not parsed.is_finite():
        return default
    return parsed


def coerce_date(value: Any) -> date | None:
    """Return a calendar date for ``value`` or ``None`` when unparseable."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = pd.to_datetime(str(value).strip(), errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def parse_transaction_rows(rows: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """Convert sheet rows into transactions ordered by date.

    Rows missing a date, type or market are dropped, as are rows whose date
    or type tag cannot be parsed. Numeric fields fall back to ``0`` (units,
    price, fees) or ``1`` (split ratio). Ties on the same date keep their
    input order.
    """

    transactions: List[Transaction] = []
    dropped = 0
    for index, row in enumerate(rows, start=1):
        if any(not row.get(key) for key in _REQUIRED_FIELDS):
            dropped += 1
            continue

        tx_date = coerce_date(row["date"])
        if tx_date is None:
            logger.warning("Dropping row %d: unparseable date %r", index, row["date"])
            dropped += 1
            continue
        try:
            tx_type = TransactionType.parse(str(row["type"]))
        except ValueError:
            logger.warning("Dropping row %d: unknown transaction type %r", index, row["type"])
            dropped += 1
            continue

        symbol = str(_first(row, "symbol") or f"Asset_{index}").strip()
        split_ratio = coerce_decimal(_first(row, "split", "split_ratio"), Decimal("1"))
        if split_ratio == 0:
            split_ratio = Decimal("1")

        transactions.append(
            Transaction(
                date=tx_date,
                type=tx_type,
                market=str(row["market"]).strip(),
                symbol=symbol,
                units=coerce_decimal(_first(row, "units"), Decimal("0")),
                price=coerce_decimal(_first(row, "txPrice", "price"), Decimal("0")),
                fees=coerce_decimal(_first(row, "fees"), Decimal("0")),
                split_ratio=split_ratio,
                currency=str(_first(row, "currency") or "USD").strip(),
            )
        )

    if dropped:
        logger.info("Skipped %d malformed transaction rows", dropped)
    transactions.sort(key=lambda tx: tx.date)
    return transactions


__all__ = ["coerce_date", "coerce_decimal", "parse_transaction_rows"]
