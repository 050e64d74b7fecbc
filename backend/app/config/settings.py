"""Application configuration and environment helpers."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from folio_analytics import AnalyticsConfig
from folio_analytics.sectors import DEFAULT_SECTORS
from folio_analytics.tax import TaxRates

DEFAULT_BASE_CURRENCY = "USD"
DEFAULT_REPORTING_CURRENCY = "PLN"


class AppSettings(BaseSettings):
    """Configuration options for the portfolio analytics service."""

    app_name: str = Field(default="Portfolio Ledger Analytics")
    base_currency: str = Field(default=DEFAULT_BASE_CURRENCY)
    reporting_currency: str = Field(default=DEFAULT_REPORTING_CURRENCY)
    log_level: str = Field(default="INFO")

    risk_free_rate: float = Field(default=0.055, description="Annual risk-free rate (Polish 10Y bond).")
    metrics_cache_seconds: int = Field(default=300, ge=0)
    default_period: Literal["1M", "3M", "6M", "1Y", "3Y", "5Y", "ALL"] = Field(default="1Y")

    monte_carlo_scenarios: int = Field(default=1000, gt=0)
    monte_carlo_horizon_days: int = Field(default=252, gt=0)
    monte_carlo_min_history: int = Field(default=50, gt=1)

    tax_domestic_dividend: Decimal = Field(default=Decimal("0.19"))
    tax_domestic_capital_gains: Decimal = Field(default=Decimal("0.19"))
    tax_foreign_dividend_withheld: Decimal = Field(default=Decimal("0.15"))
    tax_foreign_dividend_supplemental: Decimal = Field(default=Decimal("0.04"))
    tax_foreign_capital_gains: Decimal = Field(default=Decimal("0.19"))
    tax_crypto_capital_gains: Decimal = Field(default=Decimal("0.19"))

    sector_map: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SECTORS))

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="portfolio-analytics")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def analytics_config(self) -> AnalyticsConfig:
        """Translate settings into the engine's configuration record."""

        return AnalyticsConfig(
            risk_free_rate=self.risk_free_rate,
            cache_duration=timedelta(seconds=self.metrics_cache_seconds),
            default_period=self.default_period,
            reporting_currency=self.reporting_currency,
            monte_carlo_scenarios=self.monte_carlo_scenarios,
            monte_carlo_horizon=self.monte_carlo_horizon_days,
            monte_carlo_min_history=self.monte_carlo_min_history,
            tax_rates=TaxRates(
                domestic_dividend=self.tax_domestic_dividend,
                domestic_capital_gains=self.tax_domestic_capital_gains,
                foreign_dividend_withheld=self.tax_foreign_dividend_withheld,
                foreign_dividend_supplemental=self.tax_foreign_dividend_supplemental,
                foreign_capital_gains=self.tax_foreign_capital_gains,
                crypto_capital_gains=self.tax_crypto_capital_gains,
            ),
            sectors=dict(self.sector_map),
        )

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a compact dict for logging purposes."""

        return {k: v for k, v in self.model_dump().items() if k != "sector_map"}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_BASE_CURRENCY",
    "DEFAULT_REPORTING_CURRENCY",
    "get_settings",
]
