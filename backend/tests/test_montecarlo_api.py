"""Monte Carlo API tests."""

from __future__ import annotations

from datetime import date, timedelta

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_analytics_config
from app.api.routes.montecarlo import router as montecarlo_router
from folio_analytics import AnalyticsConfig

TRANSACTIONS = [
    {"date": "2023-01-10", "type": "Buy", "market": "US", "symbol": "AAPL", "units": 10, "txPrice": 150},
]


def _app() -> FastAPI:
    app = FastAPI()
    app.include_router(montecarlo_router, prefix="/risk/montecarlo", tags=["risk"])
    app.dependency_overrides[get_analytics_config] = lambda: AnalyticsConfig(
        monte_carlo_scenarios=300, monte_carlo_horizon=30
    )
    return app


def _valuations(count: int) -> list[dict]:
    start = date(2024, 1, 1)
    return [
        {"date": (start + timedelta(days=i)).isoformat(), "market_value": 1500.0 + 8.0 * ((i * 7) % 5) + i}
        for i in range(count)
    ]


async def _run(payload: dict):
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post("/risk/montecarlo/run", json=payload)


async def test_montecarlo_run_percentile_bounds():
    response = await _run(
        {
            "transactions": TRANSACTIONS,
            "prices": {"AAPL": 160.0},
            "as_of": "2024-04-01",
            "valuations": _valuations(80),
            "seed": 42,
            "include_series": True,
        }
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["current_value"] == 1600.0
    assert payload["scenario_count"] == 300
    assert len(payload["scenarios"]) == 300
    percentiles = payload["percentiles"]
    assert percentiles["p5"] <= percentiles["p25"] <= percentiles["p50"] <= percentiles["p75"] <= percentiles["p95"]
    assert 0.0 <= payload["probability_of_loss"] <= 1.0


async def test_montecarlo_is_reproducible_with_seed():
    payload = {
        "transactions": TRANSACTIONS,
        "prices": {"AAPL": 160.0},
        "as_of": "2024-04-01",
        "valuations": _valuations(80),
        "scenarios": 50,
        "time_horizon": 10,
        "seed": 7,
    }

    first = (await _run(payload)).json()
    second = (await _run(payload)).json()

    assert first == second
    assert first["scenarios"] is None
    assert first["scenario_count"] == 50


async def test_montecarlo_requires_history():
    response = await _run({"transactions": TRANSACTIONS, "prices": {"AAPL": 160.0}, "valuations": _valuations(20)})

    assert response.status_code == 400
    assert "Not enough valuation history" in response.json()["detail"]


async def test_montecarlo_rejects_non_positive_sizes():
    response = await _run({"valuations": _valuations(80), "scenarios": 0})

    assert response.status_code == 422
