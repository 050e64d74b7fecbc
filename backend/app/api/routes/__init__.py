"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .portfolio import router as portfolio_router
from .montecarlo import router as montecarlo_router

api_router = APIRouter()
api_router.include_router(portfolio_router, prefix="/portfolio", tags=["portfolio"])
api_router.include_router(montecarlo_router, prefix="/risk/montecarlo", tags=["risk"])

__all__ = ["api_router"]
