"""Data ingestion layer.

## Submodules

- `base.py`: Base class shared by scrapers
- `zerodha/`: Zerodha Markets stock page and JSON endpoint fetch layer
"""

from .base import BaseScraper
from .zerodha import StockDataReport, ZerodhaService

__all__ = [
    "BaseScraper",
    "StockDataReport",
    "ZerodhaService",
]
