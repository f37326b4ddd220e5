"""Endpoint catalogue for a Zerodha Markets stock.

Every stock has an HTML landing page at
`/markets/stocks/<EXCHANGE>/<SYMBOL>/` and five JSON endpoints below it.
The order of `API_ENDPOINTS` is the fetch order and the order of the
aggregate report.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from stockbrief.core.config import ZerodhaConfig, get_config
from stockbrief.core.errors import ConfigError

COMMON_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Sec-Ch-Ua": '"Not)A;Brand";v="8", "Chromium";v="138"',
        "Sec-Ch-Ua-Mobile": "?0",
        "Sec-Ch-Ua-Platform": '"macOS"',
        "Accept-Language": "en-GB,en;q=0.9",
        "Sec-Fetch-Site": "same-origin",
        "Priority": "u=0, i",
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,"
            "image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
        ),
        "Accept-Encoding": "gzip, deflate, br",
        "DNT": "1",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-User": "?1",
        "Sec-Fetch-Dest": "document",
        "Cache-Control": "max-age=0",
    }
)

STOCK_PAGE_HEADERS: Mapping[str, str] = MappingProxyType(dict(COMMON_HEADERS))

API_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        **COMMON_HEADERS,
        "X-Requested-With": "XMLHttpRequest",
        "Accept": "*/*",
        "Sec-Fetch-Mode": "cors",
        "Sec-Fetch-Dest": "empty",
        "Content-Type": "application/json",
    }
)

PRICE_API_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        **API_HEADERS,
        "Priority": "u=1, i",
    }
)

STOCK_PAGE_KEY = "stock_page"

# (key, path below the stock page, display name, headers)
API_ENDPOINTS: tuple[tuple[str, str, str, Mapping[str, str]], ...] = (
    ("financials", "financials/", "financials API", API_HEADERS),
    ("peers", "peers/", "peers API", API_HEADERS),
    ("price", "price/", "price API", PRICE_API_HEADERS),
    ("revenue_mix", "revenue_mix/", "revenue mix API", API_HEADERS),
    ("shareholdings", "shareholdings/", "shareholdings API", API_HEADERS),
)


@dataclass(frozen=True)
class EndpointSpec:
    """One fetchable endpoint of one stock."""

    key: str
    url: str
    headers: Mapping[str, str]
    display_name: str


def stock_page_endpoint(
    symbol: str, exchange: str, zerodha_config: ZerodhaConfig | None = None
) -> EndpointSpec:
    """Landing page endpoint for a stock."""
    zerodha_config = zerodha_config or get_config().zerodha
    return EndpointSpec(
        key=STOCK_PAGE_KEY,
        url=zerodha_config.stock_page_url(symbol, exchange),
        headers=STOCK_PAGE_HEADERS,
        display_name="stock page",
    )


def api_endpoints(
    symbol: str, exchange: str, zerodha_config: ZerodhaConfig | None = None
) -> list[EndpointSpec]:
    """JSON endpoints for a stock, in fetch order."""
    page_url = stock_page_endpoint(symbol, exchange, zerodha_config).url
    return [
        EndpointSpec(key=key, url=page_url + path, headers=headers, display_name=name)
        for key, path, name, headers in API_ENDPOINTS
    ]


def validate_catalogue(endpoints: Sequence[EndpointSpec]) -> None:
    """Reject a malformed endpoint catalogue.

    Raises:
        ConfigError: Empty URL or key, or duplicate keys
    """
    seen: set[str] = set()
    for endpoint in endpoints:
        if not endpoint.key or not endpoint.url:
            raise ConfigError(f"Endpoint {endpoint!r} has an empty key or URL")
        if endpoint.key in seen:
            raise ConfigError(f"Duplicate endpoint key '{endpoint.key}' in catalogue")
        seen.add(endpoint.key)
