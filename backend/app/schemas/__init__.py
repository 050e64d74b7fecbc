"""Pydantic schema exports."""

from .portfolio import (
    CorrelationPairSchema,
    CorrelationRequest,
    CorrelationResponse,
    FXRatePoint,
    HoldingSchema,
    HoldingsResponse,
    LotSchema,
    MetricsRequest,
    MetricsResponse,
    PortfolioRequest,
    TaxRequest,
    TaxResponse,
    ValuationPoint,
)
from .montecarlo import (
    MonteCarloPercentiles,
    MonteCarloRequest,
    MonteCarloResponse,
)

__all__ = [
    "CorrelationPairSchema",
    "CorrelationRequest",
    "CorrelationResponse",
    "FXRatePoint",
    "HoldingSchema",
    "HoldingsResponse",
    "LotSchema",
    "MetricsRequest",
    "MetricsResponse",
    "PortfolioRequest",
    "TaxRequest",
    "TaxResponse",
    "ValuationPoint",
    "MonteCarloPercentiles",
    "MonteCarloRequest",
    "MonteCarloResponse",
]
