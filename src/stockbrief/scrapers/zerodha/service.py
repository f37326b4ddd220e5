"""Zerodha Markets fetch orchestrator.

Fetches a stock's landing page and its JSON endpoints while trying not to
look like a bot:

- every attempt is dressed with the next user agent/referer and the current
  session/device identity
- an HTTP 429 rotates the identity and retries the endpoint exactly once
- a challenge page rotates the identity for later requests but is not retried
- JSON endpoints are fetched one after another; only the landing page runs
  alongside them

No fetch failure is raised to the caller. Each endpoint ends as exactly one
`FetchSuccess` or `FetchFailure` inside the returned report.
"""

from __future__ import annotations

import asyncio
import random
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_none,
)

from stockbrief.core.config import AppConfig, ZerodhaConfig, get_config
from stockbrief.parsers.page_text import extract_page_text
from stockbrief.scrapers.base import BaseScraper
from stockbrief.scrapers.zerodha.challenge import is_challenge
from stockbrief.scrapers.zerodha.endpoints import (
    EndpointSpec,
    api_endpoints,
    stock_page_endpoint,
    validate_catalogue,
)
from stockbrief.scrapers.zerodha.errors import (
    ChallengeDetected,
    ErrorKind,
    FetchError,
    RateLimited,
)
from stockbrief.scrapers.zerodha.identity import IdentityRotator
from stockbrief.scrapers.zerodha.models import (
    AggregateReport,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    StockDataReport,
    StockPageResult,
    decode_body,
)
from stockbrief.scrapers.zerodha.request_builder import PreparedRequest, build_request
from stockbrief.scrapers.zerodha.transport import Transport
from stockbrief.utils.logger import stock_context
from stockbrief.utils.metrics import (
    challenges_detected,
    rate_limit_retries,
    requests_total,
    stock_fetch_duration,
)

EndpointFactory = Callable[[str, str, ZerodhaConfig], Sequence[EndpointSpec]]

NO_DATA_ERROR = {
    "code": "NO_DATA_AVAILABLE",
    "message": "No data could be fetched for this stock",
    "details": "Both stock page and API requests failed",
}


class ZerodhaService(BaseScraper):
    """Fetch layer for Zerodha Markets stock pages and JSON endpoints."""

    def __init__(
        self,
        transport: Transport | None = None,
        rotator: IdentityRotator | None = None,
        app_config: AppConfig | None = None,
        endpoint_factory: EndpointFactory = api_endpoints,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            transport: HTTP transport (built from config when omitted)
            rotator: Identity state owned by this service
            app_config: Application config (global config when omitted)
            endpoint_factory: Builds the JSON endpoint catalogue for a stock
            rng: Random source for tokens and cache-busting parameters
        """
        super().__init__("zerodha")
        self.config = app_config or get_config()
        self._rng = rng or random.Random()
        self.rotator = rotator or IdentityRotator(rng=self._rng)
        self.transport = transport or Transport(self.config.scraper)
        self._endpoint_factory = endpoint_factory
        self.request_count = 0

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> ZerodhaService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Single endpoint
    # ------------------------------------------------------------------

    def _prepare(self, endpoint: EndpointSpec, retry: bool = False) -> PreparedRequest:
        return build_request(
            endpoint.url,
            endpoint.headers,
            self.rotator.current(),
            self.rotator.next_user_agent(),
            self.rotator.next_referer(),
            retry=retry,
            rng=self._rng,
        )

    def _rotate_before_retry(self, endpoint: EndpointSpec) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            rate_limit_retries.labels(endpoint=endpoint.key).inc()
            self.logger.warning(
                "Rate limited, retrying with fresh identity",
                endpoint=endpoint.display_name,
                attempt=retry_state.attempt_number,
            )
            self.rotator.rotate(reason="rate_limited")

        return before_sleep

    async def _attempt(self, endpoint: EndpointSpec, prepared: PreparedRequest) -> httpx.Response:
        self.logger.info(
            "Making request",
            endpoint=endpoint.display_name,
            url=endpoint.url,
            session=prepared.identity.short,
        )
        response = await self.transport.send(prepared.url, prepared.headers, prepared.params)
        self.request_count += 1

        if response.status_code == 429:
            raise RateLimited(f"{endpoint.display_name} rate limited", url=endpoint.url)

        payload = decode_body(response.text, response.headers.get("content-type"))
        if is_challenge(payload):
            challenges_detected.labels(endpoint=endpoint.key).inc()
            self.logger.warning("Challenge page detected", endpoint=endpoint.display_name)
            self.rotator.rotate(reason="challenge")
            raise ChallengeDetected(
                f"Challenge page served for {endpoint.display_name}",
                url=endpoint.url,
                status_code=response.status_code,
            )

        return response

    async def make_request(self, endpoint: EndpointSpec) -> FetchResult:
        """Fetch one endpoint, retrying once after a 429.

        Args:
            endpoint: Endpoint to fetch

        Returns:
            FetchSuccess, or FetchFailure describing the terminal error
        """
        prepared: PreparedRequest | None = None
        attempts = 0
        retrying = AsyncRetrying(
            stop=stop_after_attempt(1 + self.config.scraper.max_rate_limit_retries),
            retry=retry_if_exception_type(RateLimited),
            wait=wait_none(),
            before_sleep=self._rotate_before_retry(endpoint),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    prepared = self._prepare(endpoint, retry=attempts > 1)
                    response = await self._attempt(endpoint, prepared)
        except FetchError as e:
            requests_total.labels(endpoint=endpoint.key, outcome=e.kind).inc()
            self.logger.warning(
                "Request failed",
                endpoint=endpoint.display_name,
                kind=e.kind,
                status=e.status_code,
                attempts=attempts,
                error=e.message,
            )
            return FetchFailure(
                endpoint_key=endpoint.key,
                endpoint_name=endpoint.display_name,
                url=endpoint.url,
                error_kind=e.kind,
                message=e.message,
                status_code=e.status_code,
                identity=prepared.identity if prepared else None,
                attempts=attempts,
            )

        requests_total.labels(endpoint=endpoint.key, outcome="success").inc()
        self.logger.info(
            "Request successful",
            endpoint=endpoint.display_name,
            status=response.status_code,
            request_number=self.request_count,
            retried=attempts > 1,
        )
        return FetchSuccess(
            endpoint_key=endpoint.key,
            endpoint_name=endpoint.display_name,
            url=endpoint.url,
            status_code=response.status_code,
            content_type=response.headers.get("content-type"),
            body=response.text,
            identity=prepared.identity,
            user_agent=prepared.user_agent,
            referer=prepared.referer,
            retried=attempts > 1,
            attempts=attempts,
        )

    # ------------------------------------------------------------------
    # Stock level
    # ------------------------------------------------------------------

    async def fetch_stock_page(
        self, symbol: str, exchange: str, endpoint: EndpointSpec | None = None
    ) -> StockPageResult | FetchFailure:
        """Fetch the landing page and reduce it to plain text."""
        endpoint = endpoint or stock_page_endpoint(symbol, exchange, self.config.zerodha)
        result = await self.make_request(endpoint)
        if not result.success:
            return result
        text = extract_page_text(result.body)
        return StockPageResult.from_success(result, text, symbol, exchange)

    async def fetch_all_api_data(
        self,
        symbol: str,
        exchange: str,
        endpoints: Sequence[EndpointSpec] | None = None,
    ) -> AggregateReport:
        """Fetch every JSON endpoint strictly one after another.

        Args:
            symbol: Stock symbol
            exchange: BSE or NSE
            endpoints: Catalogue override (built from the factory when omitted)

        Returns:
            AggregateReport with one result per endpoint, in catalogue order
        """
        if endpoints is None:
            endpoints = self._endpoint_factory(symbol, exchange, self.config.zerodha)
        successful: list[FetchSuccess] = []
        failed: list[FetchFailure] = []

        self.logger.info(
            "Fetching API data",
            symbol=symbol,
            exchange=exchange,
            endpoints=len(endpoints),
        )

        for endpoint in endpoints:
            try:
                result = await self.make_request(endpoint)
            except Exception as e:
                self.logger.error(
                    "Error processing endpoint",
                    endpoint=endpoint.display_name,
                    error=str(e),
                    exc_info=True,
                )
                result = FetchFailure(
                    endpoint_key=endpoint.key,
                    endpoint_name=endpoint.display_name,
                    url=endpoint.url,
                    error_kind=ErrorKind.ENDPOINT_ERROR,
                    message=f"Failed to process {endpoint.display_name}: {e}",
                )

            if result.success:
                successful.append(result)
            else:
                failed.append(result)

        self.logger.info(
            "API data fetched",
            symbol=symbol,
            successful=len(successful),
            failed=len(failed),
        )
        return AggregateReport(
            symbol=symbol,
            exchange=exchange,
            timestamp=datetime.now(timezone.utc),
            successful=tuple(successful),
            failed=tuple(failed),
        )

    async def fetch_complete_stock_data(self, symbol: str, exchange: str) -> StockDataReport:
        """Fetch the landing page and all JSON endpoints for a stock.

        The page fetch and the sequential JSON batch run concurrently and are
        both awaited to completion.

        Args:
            symbol: Upper-cased, validated stock symbol
            exchange: BSE or NSE

        Returns:
            StockDataReport

        Raises:
            ConfigError: The endpoint catalogue is malformed
        """
        page_endpoint = stock_page_endpoint(symbol, exchange, self.config.zerodha)
        endpoints = list(self._endpoint_factory(symbol, exchange, self.config.zerodha))
        validate_catalogue([page_endpoint, *endpoints])

        self.logger.info("Fetching complete stock data", symbol=symbol, exchange=exchange)
        start = time.perf_counter()

        with stock_context(symbol, exchange):
            page_outcome, api_outcome = await asyncio.gather(
                self.fetch_stock_page(symbol, exchange, page_endpoint),
                self.fetch_all_api_data(symbol, exchange, endpoints),
                return_exceptions=True,
            )

        stock_page = self._settled(page_outcome, "stock page", symbol)
        api_data = self._settled(api_outcome, "api data", symbol)

        has_stock_page = stock_page is not None and stock_page.success
        has_api_data = api_data is not None and len(api_data.successful) > 0
        success = has_stock_page or has_api_data

        stock_fetch_duration.labels(
            exchange=exchange, status="success" if success else "no_data"
        ).observe(time.perf_counter() - start)

        if not success:
            self.logger.warning("No data available", symbol=symbol, exchange=exchange)

        return StockDataReport(
            success=success,
            symbol=symbol,
            exchange=exchange,
            timestamp=datetime.now(timezone.utc),
            stock_page=stock_page,
            api_data=api_data,
            error=None if success else dict(NO_DATA_ERROR),
        )

    def _settled(self, outcome: Any, branch: str, symbol: str) -> Any:
        if isinstance(outcome, BaseException):
            self.logger.error(
                "Fetch branch crashed",
                branch=branch,
                symbol=symbol,
                error=repr(outcome),
            )
            return None
        return outcome

    async def scrape(self, symbol: str, exchange: str) -> StockDataReport:  # type: ignore[override]
        """Alias of `fetch_complete_stock_data`."""
        return await self.fetch_complete_stock_data(symbol, exchange)

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    @staticmethod
    def format_api_data(api_data: AggregateReport | None) -> dict[str, dict[str, Any]]:
        """Key successful endpoint payloads by endpoint key.

        Returns:
            {endpoint_key: {data, status_code, content_type, url}}
        """
        formatted: dict[str, dict[str, Any]] = {}
        if api_data is None:
            return formatted
        for result in api_data.successful:
            formatted[result.endpoint_key] = {
                "data": result.data,
                "status_code": result.status_code,
                "content_type": result.content_type,
                "url": result.url,
            }
        return formatted
