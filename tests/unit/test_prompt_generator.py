"""Tests for analysis prompt generation."""

import asyncio
import json
from datetime import datetime, timezone

import pytest

from stockbrief.core.errors import PromptError
from stockbrief.prompts import PromptGenerator, filter_historical_data_to_last_two_years
from stockbrief.prompts.generator import API_UNAVAILABLE, PAGE_UNAVAILABLE, SECTION_RULE
from tests.fixtures.zerodha_data import ScriptedTransport, healthy_routes, make_service

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)
THREE_YEARS_AGO_MS = int(datetime(2022, 6, 1, tzinfo=timezone.utc).timestamp() * 1000)
ONE_YEAR_AGO_MS = int(datetime(2024, 6, 1, tzinfo=timezone.utc).timestamp() * 1000)


@pytest.fixture
def generator():
    return PromptGenerator(now=NOW)


@pytest.fixture
def stock_data():
    """Stock data in the shape returned by POST /api/stock/fetch."""
    return {
        "symbol": "RELIANCE",
        "exchange": "NSE",
        "timestamp": "2025-06-01T00:00:00+00:00",
        "stock_page": {
            "success": True,
            "data": "Reliance Industries Ltd. P/E 24.5",
            "url": "https://zerodha.com/markets/stocks/NSE/RELIANCE/",
            "status_code": 200,
        },
        "api_data": {
            "financials": {"data": {"summary": {"revenue": [1, 2]}}, "status_code": 200},
            "price": {
                "data": {
                    "returns": {"1M": 2.5},
                    "historical_data": [[THREE_YEARS_AGO_MS, 2000.0], [ONE_YEAR_AGO_MS, 2900.0]],
                },
                "status_code": 200,
            },
        },
    }


class TestHistoricalFilter:
    """Tests for filter_historical_data_to_last_two_years."""

    def test_drops_old_points(self):
        """Test that points older than two years are removed."""
        price = {"historical_data": [[THREE_YEARS_AGO_MS, 1], [ONE_YEAR_AGO_MS, 2]], "x": 1}

        filtered = filter_historical_data_to_last_two_years(price, NOW)

        assert filtered == {"historical_data": [[ONE_YEAR_AGO_MS, 2]], "x": 1}
        assert len(price["historical_data"]) == 2

    def test_malformed_points_dropped(self):
        """Test that points without a numeric timestamp are dropped."""
        price = {"historical_data": [[], "2024-01-01", [ONE_YEAR_AGO_MS, 2], ["abc", 1]]}

        assert filter_historical_data_to_last_two_years(price, NOW)["historical_data"] == [
            [ONE_YEAR_AGO_MS, 2]
        ]

    @pytest.mark.parametrize("price", [None, "text", {"returns": {}}, {"historical_data": "x"}])
    def test_passthrough(self, price):
        """Test that data without a history list is returned unchanged."""
        assert filter_historical_data_to_last_two_years(price, NOW) == price

    def test_leap_day(self):
        """Test that the cutoff handles 29 February."""
        leap_day = datetime(2024, 2, 29, tzinfo=timezone.utc)
        cutoff_ms = int(datetime(2022, 2, 28, tzinfo=timezone.utc).timestamp() * 1000)
        price = {"historical_data": [[cutoff_ms, 1], [cutoff_ms - 1, 0]]}

        assert filter_historical_data_to_last_two_years(price, leap_day)["historical_data"] == [
            [cutoff_ms, 1]
        ]


class TestFormatting:
    """Tests for the data formatting helpers."""

    def test_stock_page_footer(self, generator, stock_data):
        """Test page text followed by source, status and timestamp."""
        text = generator.format_stock_page_data(stock_data["stock_page"])

        assert text.startswith("Reliance Industries Ltd. P/E 24.5\n\n")
        assert "Source: https://zerodha.com/markets/stocks/NSE/RELIANCE/" in text
        assert "Status: 200" in text
        assert text.endswith("Timestamp: N/A")

    @pytest.mark.parametrize("page", [None, {"success": False}, "text"])
    def test_stock_page_missing(self, generator, page):
        """Test the placeholder for an unusable page."""
        assert generator.format_stock_page_data(page) == PAGE_UNAVAILABLE

    def test_formatted_mapping(self, generator, stock_data):
        """Test the endpoint-keyed mapping format."""
        text = generator.format_api_data(stock_data["api_data"])

        assert text.startswith('FINANCIALS DATA:\n\n{"summary":{"revenue":[1,2]}}\n\n')
        assert text.count(SECTION_RULE) == 2
        assert "PRICE DATA:" in text

    def test_price_history_filtered(self, generator, stock_data):
        """Test that old price points never reach the prompt."""
        text = generator.format_api_data(stock_data["api_data"])

        assert str(ONE_YEAR_AGO_MS) in text
        assert str(THREE_YEARS_AGO_MS) not in text

    def test_raw_aggregate(self, generator):
        """Test the raw aggregate format with successful/failed lists."""
        aggregate = {
            "successful": [
                {"endpoint_key": "revenue_mix", "name": "revenue mix API", "data": {"a": 1}},
                {"endpoint_key": "peers", "name": "peers API", "data": "plain text"},
            ],
            "failed": [{"endpoint_key": "price"}],
        }

        text = generator.format_api_data(aggregate)

        assert text.startswith('REVENUE_MIX DATA:\n\n{"a":1}\n\n')
        assert "PEERS DATA:\n\nplain text\n\n" in text
        assert "PRICE DATA" not in text

    @pytest.mark.parametrize("api_data", [None, {}, {"successful": [], "failed": []}])
    def test_api_data_missing(self, generator, api_data):
        """Test the placeholder when no endpoint succeeded."""
        assert generator.format_api_data(api_data) == API_UNAVAILABLE

    def test_non_ascii_kept(self, generator):
        """Test that rupee signs survive JSON encoding."""
        text = generator.format_api_data({"financials": {"data": {"unit": "₹ Cr"}}})
        assert "₹ Cr" in text


class TestInvestorProfiles:
    """Tests for investor type customization."""

    def test_default_profile(self, generator):
        """Test the new graduate profile with the default salary."""
        profile = generator.customize_for_investor_type()

        assert "new graduate investor who:" in profile
        assert "limited investment experience" in profile
        assert "₹50,000/month" in profile

    def test_experienced(self, generator):
        """Test the experienced profile."""
        profile = generator.customize_for_investor_type("experienced")
        assert "significant investment experience" in profile

    def test_conservative(self, generator):
        """Test the conservative profile."""
        assert "(conservative approach)" in generator.customize_for_investor_type("conservative")

    def test_aggressive(self, generator):
        """Test the aggressive profile."""
        assert "balanced, and actionable advice" in generator.customize_for_investor_type(
            "AGGRESSIVE"
        )

    def test_salary(self, generator):
        """Test that the salary option replaces the default."""
        assert "₹100,000/month" in generator.customize_for_investor_type("new_graduate", 100000)

    def test_unknown_type(self, generator):
        """Test that unknown investor types are rejected."""
        with pytest.raises(PromptError):
            generator.customize_for_investor_type("gambler")

    @pytest.mark.parametrize("salary", [0, -5, "50k", True])
    def test_invalid_salary(self, generator, salary):
        """Test that non-positive or non-integer salaries are rejected."""
        with pytest.raises(PromptError):
            generator.customize_for_investor_type("new_graduate", salary)


class TestGeneratePrompt:
    """Tests for generate_prompt."""

    def test_fills_every_placeholder(self, generator, stock_data):
        """Test that no template placeholder survives."""
        result = generator.generate_prompt("reliance", stock_data)

        assert "$stock_symbol" not in result.prompt
        assert "$api_data" not in result.prompt
        assert "Comprehensive Stock Analysis Prompt for RELIANCE" in result.prompt
        assert "### STOCK PAGE DATA:\nReliance Industries Ltd. P/E 24.5" in result.prompt
        assert "FINANCIALS DATA:" in result.prompt
        assert "new graduate investor who:" in result.prompt
        assert result.symbol == "reliance"

    def test_options_applied(self, generator, stock_data):
        """Test investor type and salary options."""
        options = {"investor_type": "experienced", "salary": 75000}

        result = generator.generate_prompt("RELIANCE", stock_data, options)

        assert "experienced investor who:" in result.prompt
        assert "₹75,000/month" in result.prompt
        assert result.options == options

    def test_dollar_signs_in_data(self, generator, stock_data):
        """Test that `$` in fetched data is kept literally."""
        stock_data["stock_page"]["data"] = "Price $stock_symbol $100"

        result = generator.generate_prompt("RELIANCE", stock_data)

        assert "Price $stock_symbol $100" in result.prompt

    def test_accepts_report(self, generator):
        """Test that a StockDataReport can be passed directly."""
        service = make_service(ScriptedTransport(healthy_routes()))
        report = asyncio.run(service.fetch_complete_stock_data("RELIANCE", "NSE"))

        result = generator.generate_prompt("RELIANCE", report)

        assert "Reliance Industries share price" in result.prompt
        assert "SHAREHOLDINGS DATA:" in result.prompt
        assert "Timestamp: N/A" not in result.prompt

    def test_bad_option_raises(self, generator, stock_data):
        """Test that an invalid option surfaces as PromptError."""
        with pytest.raises(PromptError):
            generator.generate_prompt("RELIANCE", stock_data, {"investor_type": "gambler"})

    def test_bad_data_raises(self, generator):
        """Test that unusable input surfaces as PromptError."""
        with pytest.raises(PromptError):
            generator.generate_prompt("RELIANCE", {"api_data": ["not", "a", "mapping"]})

    def test_result_serializes(self, generator, stock_data):
        """Test the result's dict form."""
        payload = generator.generate_prompt("RELIANCE", stock_data).to_dict()

        assert set(payload) == {"prompt", "symbol", "timestamp", "options"}
        json.dumps(payload)


class TestValidateStockData:
    """Tests for validate_stock_data."""

    def test_valid(self, generator, stock_data):
        """Test that usable data has no errors."""
        assert generator.validate_stock_data(stock_data) == []

    def test_missing(self, generator):
        """Test that missing data is reported."""
        assert generator.validate_stock_data(None) == ["No stock data provided"]

    def test_missing_symbol(self, generator, stock_data):
        """Test that the symbol is required."""
        del stock_data["symbol"]
        assert generator.validate_stock_data(stock_data) == ["Stock symbol is required"]

    def test_page_alone_is_enough(self, generator, stock_data):
        """Test that a page without API data is usable."""
        stock_data["api_data"] = {}
        assert generator.validate_stock_data(stock_data) == []

    def test_nothing_usable(self, generator, stock_data):
        """Test that no page and no successful endpoint is rejected."""
        stock_data["stock_page"] = None
        stock_data["api_data"] = {"successful": [], "failed": [{"endpoint_key": "peers"}]}

        assert generator.validate_stock_data(stock_data) == [
            "No valid data available (neither stock page nor API data)"
        ]


class TestTemplateAndOptions:
    """Tests for the template and option catalogue."""

    def test_template_placeholders(self, generator):
        """Test that the raw template exposes its named placeholders."""
        template = generator.load_base_prompt()

        for name in ("$stock_symbol", "$stock_page_data", "$api_data", "$investor_profile"):
            assert name in template

    def test_customization_options(self):
        """Test the option catalogue shape."""
        options = PromptGenerator.customization_options()

        assert [item["value"] for item in options["investor_types"]] == [
            "new_graduate",
            "experienced",
            "conservative",
            "aggressive",
        ]
        assert [item["value"] for item in options["salary_ranges"]] == [30000, 50000, 75000, 100000]
        assert [item["value"] for item in options["risk_levels"]] == ["low", "medium", "high"]
