"""Stockbrief - Zerodha Markets stock data and analysis prompts.

Fetches a stock's public landing page and its JSON data endpoints from
Zerodha Markets without tripping the site's bot defenses, then assembles
the results into an investment analysis prompt.

## Architecture Layers

1. **Core** (`stockbrief.core`)
   - Configuration management
   - Error handling

2. **Data Ingestion** (`stockbrief.scrapers`)
   - Identity rotation and browser-like request headers
   - Challenge page detection and 429 retry
   - Page + JSON endpoint orchestration

3. **Parsing** (`stockbrief.parsers`)
   - Visible text extraction from HTML

4. **Prompts** (`stockbrief.prompts`)
   - Analysis template and investor profiles

5. **Interfaces** (`stockbrief.api`, `stockbrief.cli`)
   - FastAPI REST API
   - Typer command-line interface

## Quick Start

```python
import asyncio

from stockbrief.prompts import PromptGenerator
from stockbrief.scrapers import ZerodhaService


async def main():
    async with ZerodhaService() as service:
        report = await service.fetch_complete_stock_data("RELIANCE", "NSE")
    print(PromptGenerator().generate_prompt("RELIANCE", report).prompt)


asyncio.run(main())
```
"""

__version__ = "1.0.0"

from stockbrief.core import (
    AppConfig,
    ConfigError,
    IntegrationError,
    PromptError,
    StockBriefError,
    ValidationError,
    get_config,
)
from stockbrief.utils.logger import get_logger

__all__ = [
    "__version__",
    "AppConfig",
    "get_config",
    "get_logger",
    "StockBriefError",
    "ValidationError",
    "IntegrationError",
    "ConfigError",
    "PromptError",
]
