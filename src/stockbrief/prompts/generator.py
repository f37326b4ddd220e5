"""Investment analysis prompt assembly.

Turns a fetched stock report into the text prompt handed to an LLM:

    generator = PromptGenerator()
    errors = generator.validate_stock_data(report)
    result = generator.generate_prompt("RELIANCE", report, {"investor_type": "experienced"})
    print(result.prompt)

`stock_data` may be a `StockDataReport` or its dict form. The `api_data`
entry may be the raw aggregate (`successful`/`failed` lists) or the mapping
produced by `ZerodhaService.format_api_data`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from stockbrief.core.errors import PromptError
from stockbrief.prompts.template import (
    BASE_PROMPT,
    DEFAULT_INVESTOR_TYPE,
    DEFAULT_SALARY,
    INVESTOR_PROFILES,
    RISK_LEVELS,
    SALARY_RANGES,
)
from stockbrief.scrapers.zerodha.models import StockDataReport
from stockbrief.utils.logger import get_logger
from stockbrief.utils.metrics import prompts_generated

logger = get_logger(__name__)

SECTION_RULE = "─" * 80
PAGE_UNAVAILABLE = "Stock page data not available"
API_UNAVAILABLE = "API data not available"
NO_DATA_MESSAGE = "No valid data available (neither stock page nor API data)"


@dataclass(frozen=True)
class PromptResult:
    """A generated prompt and the options it was built with."""

    prompt: str
    symbol: str
    timestamp: datetime
    options: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt": self.prompt,
            "symbol": self.symbol,
            "timestamp": self.timestamp.isoformat(),
            "options": self.options,
        }


def _two_years_before(now: datetime) -> datetime:
    try:
        return now.replace(year=now.year - 2)
    except ValueError:
        # 29 February
        return now.replace(year=now.year - 2, day=28)


def filter_historical_data_to_last_two_years(
    price_data: Any, now: Optional[datetime] = None
) -> Any:
    """Drop `historical_data` points older than two years.

    Points are `[timestamp_ms, ...]` lists; anything else is dropped too.
    Input without a `historical_data` list is returned unchanged.
    """
    if not isinstance(price_data, Mapping) or not isinstance(
        price_data.get("historical_data"), list
    ):
        return price_data

    cutoff = _two_years_before(now or datetime.now(timezone.utc)).timestamp() * 1000
    kept = [
        point
        for point in price_data["historical_data"]
        if isinstance(point, (list, tuple))
        and point
        and isinstance(point[0], (int, float))
        and point[0] >= cutoff
    ]
    return {**price_data, "historical_data": kept}


def _as_mapping(stock_data: Any) -> Mapping[str, Any]:
    if isinstance(stock_data, StockDataReport):
        data = stock_data.to_dict()
        if data["stock_page"]:
            data["stock_page"]["timestamp"] = data["timestamp"]
        return data
    return stock_data


class PromptGenerator:
    """Builds analysis prompts from fetched stock data."""

    def __init__(self, now: Optional[datetime] = None):
        # Fixed clock for the price history cutoff, mainly for tests
        self._now = now

    def load_base_prompt(self) -> str:
        """Return the raw template with its `$` placeholders intact."""
        return BASE_PROMPT.template

    def generate_prompt(
        self,
        symbol: str,
        stock_data: StockDataReport | Mapping[str, Any],
        options: Optional[Mapping[str, Any]] = None,
    ) -> PromptResult:
        """Fill the base template with formatted stock data.

        Args:
            symbol: Ticker symbol, upper-cased in the prompt
            stock_data: Report or its dict form
            options: `investor_type` and `salary` (monthly, rupees)

        Returns:
            PromptResult

        Raises:
            PromptError: If the data cannot be formatted or an option is invalid
        """
        options = dict(options or {})
        investor_type = options.get("investor_type") or DEFAULT_INVESTOR_TYPE
        try:
            data = _as_mapping(stock_data)
            prompt = BASE_PROMPT.substitute(
                stock_symbol=symbol.upper(),
                investor_profile=self.customize_for_investor_type(
                    investor_type, options.get("salary")
                ),
                stock_page_data=self.format_stock_page_data(data.get("stock_page")),
                api_data=self.format_api_data(data.get("api_data")),
            )
        except PromptError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error("Prompt generation failed", symbol=symbol, error=str(e))
            raise PromptError(
                f"Failed to generate analysis prompt: {e}",
                recovery_hint="Pass the stock data returned by the fetch endpoint",
            ) from e

        prompts_generated.labels(investor_type=investor_type.lower()).inc()
        logger.info(
            "Prompt generated",
            symbol=symbol.upper(),
            investor_type=investor_type,
            length=len(prompt),
        )
        return PromptResult(
            prompt=prompt,
            symbol=symbol,
            timestamp=datetime.now(timezone.utc),
            options=options,
        )

    def format_stock_page_data(self, stock_page: Any) -> str:
        """Visible page text followed by a source/status/timestamp footer."""
        if not isinstance(stock_page, Mapping) or not stock_page.get("success"):
            return PAGE_UNAVAILABLE

        return (
            f"{stock_page.get('data', '')}\n\n"
            f"Source: {stock_page.get('url', 'N/A')}\n"
            f"Status: {stock_page.get('status_code', 'N/A')}\n"
            f"Timestamp: {stock_page.get('timestamp') or 'N/A'}"
        )

    def format_api_data(self, api_data: Any) -> str:
        """One `<KEY> DATA:` block per successful endpoint, compact JSON."""
        if not api_data:
            return API_UNAVAILABLE

        if isinstance(api_data, Mapping) and isinstance(api_data.get("successful"), list):
            entries = [
                (item.get("endpoint_key") or item.get("name", ""), item.get("data"))
                for item in api_data["successful"]
            ]
        elif isinstance(api_data, Mapping):
            entries = [
                (key, value.get("data") if isinstance(value, Mapping) else value)
                for key, value in api_data.items()
            ]
        else:
            raise PromptError(f"Unsupported API data type: {type(api_data).__name__}")

        if not entries:
            return API_UNAVAILABLE

        blocks = []
        for key, payload in entries:
            if key == "price":
                payload = filter_historical_data_to_last_two_years(payload, self._now)
            if isinstance(payload, (Mapping, list)):
                body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
            else:
                body = str(payload)
            blocks.append(f"{key.upper()} DATA:\n\n{body}\n\n{SECTION_RULE}\n\n")
        return "".join(blocks)

    def customize_for_investor_type(
        self, investor_type: str = DEFAULT_INVESTOR_TYPE, salary: Optional[int] = None
    ) -> str:
        """Describe the target reader for the `Investor Profile` section."""
        profile = INVESTOR_PROFILES.get(investor_type.lower())
        if profile is None:
            raise PromptError(
                f"Unknown investor type: {investor_type}",
                recovery_hint=f"Use one of {', '.join(INVESTOR_PROFILES)}",
            )
        invalid_salary = isinstance(salary, bool) or not isinstance(salary, int) or salary <= 0
        if salary is not None and invalid_salary:
            raise PromptError(f"Salary must be a positive integer, got {salary!r}")
        return profile["profile"].format(salary=f"{salary or DEFAULT_SALARY:,}")

    def validate_stock_data(self, stock_data: Any) -> list[str]:
        """Return the reasons `stock_data` cannot back a prompt; empty when usable."""
        if not stock_data:
            return ["No stock data provided"]

        data = _as_mapping(stock_data)
        if not isinstance(data, Mapping):
            return ["No stock data provided"]

        errors = []
        if not data.get("symbol"):
            errors.append("Stock symbol is required")

        page = data.get("stock_page")
        has_page = isinstance(page, Mapping) and bool(page.get("success"))

        api_data = data.get("api_data")
        if isinstance(api_data, Mapping) and "successful" in api_data:
            has_api = bool(api_data.get("successful"))
        else:
            has_api = isinstance(api_data, Mapping) and bool(api_data)

        if not (has_page or has_api):
            errors.append(NO_DATA_MESSAGE)
        return errors

    @staticmethod
    def customization_options() -> dict[str, list[dict[str, Any]]]:
        """Investor types, salary ranges, and risk levels offered to clients."""
        return {
            "investor_types": [
                {"value": key, "label": profile["label"], "description": profile["description"]}
                for key, profile in INVESTOR_PROFILES.items()
            ],
            "salary_ranges": [dict(item) for item in SALARY_RANGES],
            "risk_levels": [dict(item) for item in RISK_LEVELS],
        }
