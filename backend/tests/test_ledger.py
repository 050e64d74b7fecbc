"""FIFO ledger replay tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from folio_analytics import TransactionType, build_holdings, mark_to_market, replay_transactions
from folio_analytics.models import Transaction


def tx(day, kind, units, price, fees="0", symbol="AAPL", market="US", split="1"):
    return Transaction(
        date=day,
        type=kind,
        market=market,
        symbol=symbol,
        units=Decimal(str(units)),
        price=Decimal(str(price)),
        fees=Decimal(str(fees)),
        split_ratio=Decimal(str(split)),
    )


def build_transactions():
    return [
        tx(date(2024, 1, 10), TransactionType.BUY, "10", "175.50", fees="1"),
        tx(date(2024, 2, 15), TransactionType.DIVIDEND, "10", "0.25"),
        tx(date(2024, 3, 20), TransactionType.SELL, "5", "180", fees="1"),
    ]


def test_buy_dividend_sell_scenario():
    holding = build_holdings(build_transactions())["AAPL"]

    assert holding.units == Decimal("5")
    # Buy fees stay in the retained basis; only lot cost leaves on sale.
    assert holding.total_cost == Decimal("5") * Decimal("175.50") + Decimal("1")
    assert holding.realized_pl == (Decimal("5") * Decimal("180") - Decimal("1")) - Decimal("5") * Decimal("175.50")
    assert holding.total_dividends == Decimal("2.50")
    assert holding.first_purchase_date == date(2024, 1, 10)
    assert holding.last_trade_date == date(2024, 3, 20)
    assert [(lot.units, lot.cost_per_unit) for lot in holding.lots] == [(Decimal("5"), Decimal("175.50"))]


def test_sell_consumes_oldest_lots_first():
    transactions = [
        tx(date(2024, 1, 1), TransactionType.BUY, "10", "10"),
        tx(date(2024, 2, 1), TransactionType.BUY, "5", "12"),
        tx(date(2024, 3, 1), TransactionType.BUY, "10", "15"),
        tx(date(2024, 4, 1), TransactionType.SELL, "12", "20", fees="2"),
    ]

    replay = replay_transactions(transactions)
    holding = replay.holdings["AAPL"]

    assert holding.realized_pl == Decimal("238") - (Decimal("100") + Decimal("24"))
    assert [(lot.units, lot.cost_per_unit) for lot in holding.lots] == [
        (Decimal("3"), Decimal("12")),
        (Decimal("10"), Decimal("15")),
    ]
    assert holding.units == Decimal("13")
    trade = replay.realized_trades[0]
    assert trade.units == Decimal("12")
    assert trade.cost == Decimal("124")
    assert trade.proceeds == Decimal("238")
    assert trade.unmatched_units == Decimal("0")


def test_rebuild_is_idempotent():
    transactions = build_transactions()

    first = build_holdings(transactions)
    second = build_holdings(transactions)

    assert first == second
    assert first["AAPL"] is not second["AAPL"]


def test_split_scales_units_and_lot_cost():
    transactions = [
        tx(date(2024, 1, 1), TransactionType.BUY, "10", "100"),
        tx(date(2024, 6, 1), TransactionType.SPLIT, "0", "0", split="2"),
    ]

    holding = build_holdings(transactions)["AAPL"]

    assert holding.units == Decimal("20")
    assert holding.total_cost == Decimal("1000")
    assert holding.lots[0].units == Decimal("20")
    assert holding.lots[0].cost_per_unit == Decimal("50")
    assert holding.average_cost == Decimal("50")


def test_capital_reduction_lowers_cost_and_counts_as_income():
    transactions = [
        tx(date(2024, 1, 1), TransactionType.BUY, "10", "100", market="PL", symbol="PKN"),
        tx(date(2024, 7, 1), TransactionType.CAPITAL_REDUCTION, "10", "5", market="PL", symbol="PKN"),
    ]

    holding = build_holdings(transactions)["PKN"]

    assert holding.total_cost == Decimal("950")
    assert holding.total_dividends == Decimal("50")
    assert holding.units == Decimal("10")


def test_oversell_is_clamped_to_open_units():
    transactions = [
        tx(date(2024, 1, 1), TransactionType.BUY, "5", "10"),
        tx(date(2024, 2, 1), TransactionType.SELL, "8", "12"),
    ]

    replay = replay_transactions(transactions)

    assert "AAPL" not in replay.holdings
    trade = replay.realized_trades[0]
    assert trade.units == Decimal("5")
    assert trade.unmatched_units == Decimal("3")
    assert trade.proceeds == Decimal("60")
    assert trade.realized_pl == Decimal("10")


def test_liquidated_positions_keep_their_realized_trades():
    transactions = [
        tx(date(2023, 1, 1), TransactionType.BUY, "2", "100", symbol="MSFT"),
        tx(date(2023, 6, 1), TransactionType.SELL, "2", "150", symbol="MSFT"),
        tx(date(2023, 2, 1), TransactionType.BUY, "1", "50"),
    ]

    replay = replay_transactions(transactions)

    assert list(replay.holdings) == ["AAPL"]
    assert [t.symbol for t in replay.realized_trades] == ["MSFT"]
    assert replay.realized_trades[0].realized_pl == Decimal("100")


def test_sector_lookup_defaults_to_unknown():
    transactions = [
        tx(date(2024, 1, 1), TransactionType.BUY, "1", "10"),
        tx(date(2024, 1, 1), TransactionType.BUY, "1", "10", symbol="ZZZ"),
    ]

    holdings = build_holdings(transactions, {"AAPL": "Information Technology"})

    assert holdings["AAPL"].sector == "Information Technology"
    assert holdings["ZZZ"].sector == "Unknown"


def test_mark_to_market_updates_priced_holdings_only():
    holdings = build_holdings(
        [
            tx(date(2024, 1, 1), TransactionType.BUY, "10", "100"),
            tx(date(2024, 1, 1), TransactionType.BUY, "2", "50", symbol="MSFT"),
        ]
    )

    total = mark_to_market(holdings, {"AAPL": 110.0})

    assert total == Decimal("1100")
    assert holdings["AAPL"].unrealized_pl == Decimal("100")
    assert holdings["MSFT"].market_value == Decimal("0")


@pytest.mark.parametrize("ratio", ["3", "0.5"])
def test_split_keeps_total_cost(ratio):
    transactions = [
        tx(date(2024, 1, 1), TransactionType.BUY, "4", "30", fees="2"),
        tx(date(2024, 2, 1), TransactionType.SPLIT, "0", "0", split=ratio),
    ]

    holding = build_holdings(transactions)["AAPL"]

    assert holding.total_cost == Decimal("122")
    assert holding.units == Decimal("4") * Decimal(ratio)


def test_market_and_currency_follow_latest_dated_row():
    transactions = [
        tx(date(2024, 3, 1), TransactionType.BUY, "1", "10", market="CRYPTO"),
        tx(date(2024, 1, 1), TransactionType.BUY, "1", "10", market="US"),
    ]

    holding = build_holdings(transactions)["AAPL"]

    assert holding.market == "CRYPTO"
    assert holding.first_purchase_date == date(2024, 1, 1)
