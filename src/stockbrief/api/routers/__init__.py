"""API routers package."""

from stockbrief.api.routers import analysis, stock

__all__ = ["stock", "analysis"]
