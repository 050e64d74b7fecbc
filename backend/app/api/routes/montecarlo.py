"""Monte Carlo risk analysis endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import build_context, get_analytics_config
from app.core.telemetry import analytics_span
from app.schemas import MonteCarloRequest, MonteCarloResponse
from folio_analytics import AnalyticsConfig

router = APIRouter()


@router.post("/run", response_model=MonteCarloResponse)
async def run_monte_carlo(
    request: MonteCarloRequest,
    config: AnalyticsConfig = Depends(get_analytics_config),
) -> MonteCarloResponse:
    """Project portfolio value from the posted valuation history."""

    context = build_context(request, config, request.valuations)
    try:
        with analytics_span("monte_carlo", valuations=len(context.valuations)):
            result = context.monte_carlo(
                request.scenarios,
                request.time_horizon,
                seed=request.seed,
                as_of=request.as_of,
            )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Not enough valuation history to run simulation "
                f"(need at least {config.monte_carlo_min_history} daily returns)."
            ),
        )
    return MonteCarloResponse.from_result(result, include_series=request.include_series)


__all__ = ["run_monte_carlo"]
