"""Schemas for Monte Carlo risk analysis."""

from __future__ import annotations

from pydantic import BaseModel, Field

from folio_analytics.models import MonteCarloResult

from .portfolio import PortfolioRequest, ValuationPoint


class MonteCarloRequest(PortfolioRequest):
    valuations: list[ValuationPoint] = Field(default_factory=list)
    scenarios: int | None = Field(default=None, gt=0, le=100_000)
    time_horizon: int | None = Field(default=None, gt=0, le=2520, description="Trading days to project")
    seed: int | None = None
    include_series: bool = False


class MonteCarloPercentiles(BaseModel):
    p5: float
    p25: float
    p50: float
    p75: float
    p95: float


class MonteCarloResponse(BaseModel):
    current_value: float
    scenario_count: int
    percentiles: MonteCarloPercentiles
    probability_of_loss: float
    scenarios: list[float] | None = None

    @classmethod
    def from_result(cls, result: MonteCarloResult, include_series: bool = False) -> "MonteCarloResponse":
        return cls(
            current_value=result.current_value,
            scenario_count=len(result.scenarios),
            percentiles=MonteCarloPercentiles(
                p5=result.percentiles.p5,
                p25=result.percentiles.p25,
                p50=result.percentiles.p50,
                p75=result.percentiles.p75,
                p95=result.percentiles.p95,
            ),
            probability_of_loss=result.probability_of_loss,
            scenarios=list(result.scenarios) if include_series else None,
        )


__all__ = [
    "MonteCarloPercentiles",
    "MonteCarloRequest",
    "MonteCarloResponse",
]
