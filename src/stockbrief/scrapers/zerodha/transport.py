"""HTTP transport for the Zerodha fetch layer.

Statuses in [200, 500) come back as ordinary responses; the orchestrator
decides what a 404 or 429 means. Only network failures, timeouts and 5xx
responses are raised, and nothing is retried here.

TLS certificate validation is off unless `SCRAPER_VERIFY_TLS` is set: the
source's certificate chain is accepted as untrusted.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from stockbrief.core.config import ScraperConfig, get_config
from stockbrief.scrapers.zerodha.errors import FetchTimeoutError, NetworkError, ServerError
from stockbrief.utils.logger import get_logger

logger = get_logger(__name__)


class Transport:
    """Thin wrapper over `httpx.AsyncClient` mapping failures onto `FetchError`s."""

    def __init__(
        self,
        scraper_config: ScraperConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize transport.

        Args:
            scraper_config: Timeout/redirect/TLS settings (global config when omitted)
            client: Pre-built client, e.g. one backed by `httpx.MockTransport`
        """
        self.config = scraper_config or get_config().scraper
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout),
            verify=self.config.verify_tls,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
        )

    async def send(
        self,
        url: str,
        headers: Mapping[str, str],
        params: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Issue one GET request.

        Args:
            url: Target URL
            headers: Complete header set
            params: Query parameters

        Returns:
            Response with a status below 500

        Raises:
            FetchTimeoutError: Connect/read/write/pool timeout
            NetworkError: Connection, DNS, protocol, decoding or redirect failure
            ServerError: 5xx response
        """
        try:
            response = await self._client.get(url, headers=dict(headers), params=params)
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(f"Request timed out: {e}", url=url) from e
        except httpx.TooManyRedirects as e:
            raise NetworkError(f"Too many redirects: {e}", url=url) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}", url=url) from e

        if response.status_code >= 500:
            raise ServerError(
                f"Server responded with {response.status_code}",
                url=url,
                status_code=response.status_code,
                retryable=True,
            )

        logger.debug("Response received", url=url, status=response.status_code)
        return response

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
