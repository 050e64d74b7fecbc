"""Default GICS sector lookup for commonly held symbols."""
from __future__ import annotations

from typing import Dict

DEFAULT_SECTORS: Dict[str, str] = {
    "AAPL": "Information Technology",
    "MSFT": "Information Technology",
    "NVDA": "Information Technology",
    "V": "Information Technology",
    "MA": "Information Technology",
    "CRM": "Information Technology",
    "ADBE": "Information Technology",
    "ORCL": "Information Technology",
    "INTC": "Information Technology",
    "CSCO": "Information Technology",
    "IBM": "Information Technology",
    "AMD": "Information Technology",
    "QCOM": "Information Technology",
    "GOOGL": "Communication Services",
    "META": "Communication Services",
    "DIS": "Communication Services",
    "NFLX": "Communication Services",
    "T": "Communication Services",
    "VZ": "Communication Services",
    "AMZN": "Consumer Discretionary",
    "TSLA": "Consumer Discretionary",
    "HD": "Consumer Discretionary",
    "MCD": "Consumer Discretionary",
    "SBUX": "Consumer Discretionary",
    "JPM": "Financials",
    "BAC": "Financials",
    "GS": "Financials",
    "WFC": "Financials",
    "C": "Financials",
    "JNJ": "Health Care",
    "UNH": "Health Care",
    "PFE": "Health Care",
    "MRK": "Health Care",
    "LLY": "Health Care",
    "ABBV": "Health Care",
    "PG": "Consumer Staples",
    "WMT": "Consumer Staples",
    "KO": "Consumer Staples",
    "PEP": "Consumer Staples",
    "COST": "Consumer Staples",
    "MO": "Consumer Staples",
    "XOM": "Energy",
    "CVX": "Energy",
    "ENB": "Energy",
    "CTRA": "Energy",
    "MMM": "Industrials",
    "CAT": "Industrials",
    "HON": "Industrials",
    "BA": "Industrials",
    "ACP": "Industrials",
    "NEM": "Materials",
    "GOLD": "Materials",
    "VALE": "Materials",
    "CDR": "Materials",
    "SO": "Utilities",
    "DUK": "Utilities",
    "BKH": "Utilities",
    "PLD": "Real Estate",
    "AMT": "Real Estate",
    "VICI": "Real Estate",
    "BTC": "Cryptocurrency",
    "ETH": "Cryptocurrency",
    "Bitcoin": "Cryptocurrency",
    "Ethereum": "Cryptocurrency",
}


__all__ = ["DEFAULT_SECTORS"]
