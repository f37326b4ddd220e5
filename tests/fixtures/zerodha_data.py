"""Canned Zerodha responses and a scripted transport for fetch layer tests."""

import asyncio
import random
import time
from dataclasses import dataclass, field

import httpx

from stockbrief.core.config import AppConfig
from stockbrief.scrapers.zerodha import IdentityRotator, ZerodhaService

BASE_URL = "https://zerodha.com/markets/stocks"

API_KEYS = ["financials", "peers", "price", "revenue_mix", "shareholdings"]

STOCK_PAGE_HTML = """
<html>
  <head>
    <title>Reliance Industries share price</title>
    <style>.price { color: green; }</style>
    <script>window.__state = {"tracking": true};</script>
  </head>
  <body>
    <h1>Reliance Industries Ltd.</h1>
    <table>
      <tr><td>P/E</td><td>24.5</td></tr>
      <tr><td>ROCE</td><td>9.8%</td></tr>
    </table>
    <p>Recent events:   Q3 results announced</p>
  </body>
</html>
"""

CHALLENGE_HTML = """
<html><head><title>Just a moment...</title></head>
<body><noscript>Enable JavaScript and cookies to continue</noscript></body></html>
"""

API_PAYLOADS = {
    "financials": {"summary": {"revenue": [100, 120, 140], "net_profit": [10, 12, 15]}},
    "peers": [{"symbol": "TCS", "mcap": 1200000, "pe": 30.1, "roce": 50.2, "de": 0.1}],
    "price": {
        "returns": {"1M": 2.5, "1YR": 12.0, "5Y": 80.1},
        "historical_data": [[1609459200000, 2000.0], [1735689600000, 2900.0]],
    },
    "revenue_mix": {"product": {"Oil to chemicals": 60, "Retail": 25, "Digital": 15}},
    "shareholdings": {"promoter": [50.3, 50.4], "fii": [22.1, 21.9]},
}


def page_url(symbol: str = "RELIANCE", exchange: str = "NSE") -> str:
    return f"{BASE_URL}/{exchange}/{symbol}/"


def api_url(key: str, symbol: str = "RELIANCE", exchange: str = "NSE") -> str:
    return f"{page_url(symbol, exchange)}{key}/"


def html_response(body: str = STOCK_PAGE_HTML, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code, text=body, headers={"content-type": "text/html; charset=utf-8"}
    )


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


def healthy_routes(symbol: str = "RELIANCE", exchange: str = "NSE") -> dict:
    """Every endpoint answers 200 with realistic content."""
    routes = {page_url(symbol, exchange): [html_response()]}
    for key in API_KEYS:
        routes[api_url(key, symbol, exchange)] = [json_response(API_PAYLOADS[key])]
    return routes


@dataclass
class SentRequest:
    url: str
    headers: dict
    params: dict
    started: float
    finished: float = 0.0


@dataclass
class ScriptedTransport:
    """Transport double answering each URL from a queue of responses.

    The last queued item repeats once the queue is down to one. Exceptions in
    the queue are raised instead of returned.
    """

    routes: dict = field(default_factory=dict)
    delay: float = 0.0
    sent: list = field(default_factory=list)
    closed: bool = False

    async def send(self, url, headers, params=None):
        request = SentRequest(url, dict(headers), dict(params or {}), time.perf_counter())
        self.sent.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        request.finished = time.perf_counter()

        queue = self.routes.get(url)
        if not queue:
            return httpx.Response(404, text="Not found", headers={"content-type": "text/html"})
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def aclose(self):
        self.closed = True

    def calls_to(self, url):
        return [request for request in self.sent if request.url == url]


def make_service(transport, seed: int = 7, **kwargs) -> ZerodhaService:
    """Service with deterministic randomness wired to a scripted transport."""
    rng = random.Random(seed)
    return ZerodhaService(
        transport=transport,
        rotator=kwargs.pop("rotator", None) or IdentityRotator(rng=rng),
        app_config=kwargs.pop("app_config", None) or AppConfig(),
        rng=rng,
        **kwargs,
    )
