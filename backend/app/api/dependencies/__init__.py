"""Shared FastAPI dependencies."""

from .analytics import build_context, get_analytics_config

__all__ = ["build_context", "get_analytics_config"]
