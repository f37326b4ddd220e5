"""Input validation for stock fetch requests.

The fetch layer trusts its inputs, so the CLI and the API run every symbol
and exchange through here first.
"""

from __future__ import annotations

import re
from typing import Any

from stockbrief.core.errors import ValidationError

SUPPORTED_EXCHANGES = ("BSE", "NSE")
SYMBOL_PATTERN = re.compile(r"[A-Z0-9]+")
SYMBOL_MIN_LENGTH = 2
SYMBOL_MAX_LENGTH = 10


def _symbol_errors(symbol: Any) -> list[str]:
    if not symbol:
        return ["Stock symbol is required"]
    if not isinstance(symbol, str):
        return ["Stock symbol must be a string"]
    if not SYMBOL_PATTERN.fullmatch(symbol.upper()):
        return ["Stock symbol must contain only letters and numbers"]
    if not SYMBOL_MIN_LENGTH <= len(symbol) <= SYMBOL_MAX_LENGTH:
        return [
            f"Stock symbol must be between {SYMBOL_MIN_LENGTH} and {SYMBOL_MAX_LENGTH} characters"
        ]
    return []


def _exchange_errors(exchange: Any) -> list[str]:
    if not exchange:
        return ["Exchange is required"]
    if not isinstance(exchange, str) or exchange.upper() not in SUPPORTED_EXCHANGES:
        return ["Exchange must be either BSE or NSE"]
    return []


def validate_symbol(symbol: Any) -> str:
    """Return the upper-cased symbol or raise ValidationError."""
    errors = _symbol_errors(symbol)
    if errors:
        raise ValidationError("Invalid input data", details=errors)
    return symbol.upper()


def validate_exchange(exchange: Any) -> str:
    """Return the upper-cased exchange or raise ValidationError."""
    errors = _exchange_errors(exchange)
    if errors:
        raise ValidationError("Invalid input data", details=errors)
    return exchange.upper()


def validate_stock_request(
    symbol: Any, exchange: Any, company_name: Any = None
) -> tuple[str, str, str | None]:
    """Validate and normalize a fetch request, reporting every problem at once.

    Returns:
        (symbol, exchange, company_name) normalized

    Raises:
        ValidationError: With one message per problem in `details`
    """
    errors = _symbol_errors(symbol) + _exchange_errors(exchange)
    if company_name is not None and not isinstance(company_name, str):
        errors.append("Company name must be a string")
    if errors:
        raise ValidationError("Invalid input data", details=errors)

    return symbol.upper(), exchange.upper(), company_name.strip() if company_name else None


def validate_analysis_request(
    symbol: Any, stock_data: Any, customizations: Any = None
) -> tuple[str, dict[str, Any], dict[str, Any]]:
    """Validate a prompt generation request.

    Returns:
        (symbol, stock_data, customizations) with the symbol upper-cased

    Raises:
        ValidationError: With one message per problem in `details`
    """
    errors = []
    if not symbol:
        errors.append("Stock symbol is required")
    elif not isinstance(symbol, str):
        errors.append("Stock symbol must be a string")

    if not stock_data:
        errors.append("Stock data is required")
    elif not isinstance(stock_data, dict):
        errors.append("Stock data must be an object")

    if customizations and not isinstance(customizations, dict):
        errors.append("Customizations must be an object")

    if errors:
        raise ValidationError("Invalid input data", details=errors)

    return symbol.upper(), stock_data, customizations or {}
