"""
Integration tests for the fetch-to-prompt pipeline.

Runs the real transport against an in-process `httpx.MockTransport`:
1. Fetch the stock page and every JSON endpoint
2. Recover from a rate limit with a fresh identity
3. Screen out challenge pages
4. Build an analysis prompt from the result
"""

import asyncio
import random
from http.cookies import SimpleCookie

import httpx
import pytest

from stockbrief.core.config import AppConfig, ScraperConfig
from stockbrief.prompts import PromptGenerator
from stockbrief.scrapers.zerodha import IdentityRotator, Transport, ZerodhaService
from tests.fixtures.zerodha_data import API_PAYLOADS, CHALLENGE_HTML, STOCK_PAGE_HTML

pytestmark = pytest.mark.integration

PAGE_PATH = "/markets/stocks/NSE/RELIANCE/"


class ZerodhaStub:
    """In-process stand-in for the Zerodha Markets site."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.overrides: dict[str, list[httpx.Response]] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        queue = self.overrides.get(path)
        if queue:
            return queue.pop(0)
        if path == PAGE_PATH:
            return httpx.Response(200, html=STOCK_PAGE_HTML)
        key = path[len(PAGE_PATH) :].strip("/")
        if path.startswith(PAGE_PATH) and key in API_PAYLOADS:
            return httpx.Response(200, json=API_PAYLOADS[key])
        return httpx.Response(404, text="Not found")

    def requests_to(self, key: str) -> list[httpx.Request]:
        path = PAGE_PATH if key == "stock_page" else f"{PAGE_PATH}{key}/"
        return [request for request in self.requests if request.url.path == path]


@pytest.fixture
def stub():
    return ZerodhaStub()


@pytest.fixture
def service(stub):
    rng = random.Random(11)
    client = httpx.AsyncClient(transport=httpx.MockTransport(stub))
    return ZerodhaService(
        transport=Transport(ScraperConfig(), client=client),
        rotator=IdentityRotator(rng=rng),
        app_config=AppConfig(),
        rng=rng,
    )


def run(service, symbol="RELIANCE", exchange="NSE"):
    async def fetch():
        async with service:
            return await service.fetch_complete_stock_data(symbol, exchange)

    return asyncio.run(fetch())


def session_cookie(request: httpx.Request) -> str:
    cookie = SimpleCookie()
    cookie.load(request.headers["Cookie"])
    return cookie["sessionid"].value


class TestFetchPipeline:
    """Integration tests for a complete stock fetch."""

    def test_complete_fetch(self, service, stub):
        """Test that every endpoint is fetched once and succeeds."""
        report = run(service)

        assert report.success is True
        assert report.stock_page.success is True
        assert "Reliance Industries Ltd." in report.stock_page.data
        assert "window.__state" not in report.stock_page.data
        assert [r.endpoint_key for r in report.api_data.successful] == list(API_PAYLOADS)
        assert report.api_data.failed == ()
        assert len(stub.requests) == 6

    def test_browser_headers_on_the_wire(self, service, stub):
        """Test that each request carries spoofed headers, cookies and cache busting."""
        run(service)

        for request in stub.requests:
            assert request.headers["User-Agent"]
            assert request.headers["Referer"]
            cookie = SimpleCookie()
            cookie.load(request.headers["Cookie"])
            assert {"sessionid", "device_id", "csrftoken", "timestamp"} <= set(cookie)
            assert {"_", "v", "t", "cache"} <= set(request.url.params)
            assert "retry" not in request.url.params

        page_request = stub.requests_to("stock_page")[0]
        assert page_request.headers["Accept"].startswith("text/html")

    def test_one_session_across_requests(self, service, stub):
        """Test that a healthy run keeps one session identity."""
        run(service)

        assert len({session_cookie(request) for request in stub.requests}) == 1

    def test_rate_limit_recovery(self, service, stub):
        """Test that a 429 is retried once under a fresh identity."""
        stub.overrides[f"{PAGE_PATH}peers/"] = [httpx.Response(429, text="Too Many Requests")]

        report = run(service)

        peers = next(r for r in report.api_data.successful if r.endpoint_key == "peers")
        assert peers.retried is True
        assert peers.attempts == 2

        first, second = stub.requests_to("peers")
        assert session_cookie(first) != session_cookie(second)
        assert second.url.params["retry"] == "1"
        assert peers.identity.session_id == session_cookie(second)

    def test_repeated_rate_limit_fails(self, service, stub):
        """Test that a second 429 is terminal."""
        stub.overrides[f"{PAGE_PATH}peers/"] = [
            httpx.Response(429, text="Too Many Requests"),
            httpx.Response(429, text="Too Many Requests"),
        ]

        report = run(service)

        failure = next(r for r in report.api_data.failed if r.endpoint_key == "peers")
        assert failure.error_kind == "rate_limited"
        assert failure.attempts == 2
        assert len(stub.requests_to("peers")) == 2
        assert report.success is True

    def test_challenge_page_not_retried(self, service, stub):
        """Test that a challenge page fails the endpoint without a retry."""
        stub.overrides[f"{PAGE_PATH}price/"] = [httpx.Response(200, html=CHALLENGE_HTML)]

        report = run(service)

        failure = next(r for r in report.api_data.failed if r.endpoint_key == "price")
        assert failure.error_kind == "challenge"
        assert len(stub.requests_to("price")) == 1

        # Later requests run under the rotated identity
        price_session = session_cookie(stub.requests_to("price")[0])
        after = stub.requests_to("revenue_mix")[0]
        assert session_cookie(after) != price_session

    def test_server_error(self, service, stub):
        """Test that a 5xx fails only its own endpoint."""
        stub.overrides[f"{PAGE_PATH}financials/"] = [httpx.Response(503, text="Unavailable")]

        report = run(service)

        failure = report.api_data.failed[0]
        assert failure.endpoint_key == "financials"
        assert failure.error_kind == "server_error"
        assert failure.status_code == 503
        assert len(report.api_data.successful) == 4

    def test_not_found_is_success(self, service, stub):
        """Test that an unknown stock's 404 page is still a result."""
        report = run(service, symbol="NOSUCH")

        assert report.stock_page.success is True
        assert report.stock_page.status_code == 404


class TestPromptPipeline:
    """Integration tests from fetch to prompt."""

    def test_prompt_from_live_fetch(self, service):
        """Test that fetched data fills every prompt section."""
        report = run(service)
        generator = PromptGenerator()

        assert generator.validate_stock_data(report) == []
        result = generator.generate_prompt("RELIANCE", report, {"investor_type": "conservative"})

        assert "Reliance Industries Ltd." in result.prompt
        for key in API_PAYLOADS:
            assert f"{key.upper()} DATA:" in result.prompt
        assert "(conservative approach)" in result.prompt
        assert "Oil to chemicals" in result.prompt

    def test_prompt_from_serialized_report(self, service):
        """Test that the JSON form of a report produces the same sections."""
        report = run(service)
        generator = PromptGenerator()

        result = generator.generate_prompt("RELIANCE", report.to_dict())

        assert "SHAREHOLDINGS DATA:" in result.prompt
        assert "Source: https://zerodha.com/markets/stocks/NSE/RELIANCE/" in result.prompt
