"""Stockbrief REST API Module.

This module provides REST API endpoints for fetching stock data and
generating analysis prompts.
"""

from stockbrief.api.main import create_app

__all__ = ["create_app"]
