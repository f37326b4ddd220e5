"""Result types produced by the Zerodha fetch layer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

from stockbrief.scrapers.zerodha.identity import Identity


def decode_body(body: str, content_type: str | None) -> Any:
    """Decode a JSON body; anything else comes back as the original text.

    A body is treated as JSON when its content type says so or, failing that,
    when it parses as a JSON object or array.
    """
    is_json_type = bool(content_type) and "json" in content_type.lower()
    looks_like_json = body.lstrip()[:1] in ("{", "[")
    if not (is_json_type or looks_like_json):
        return body
    try:
        return json.loads(body)
    except ValueError:
        return body


@dataclass(frozen=True)
class FetchSuccess:
    """A terminal successful attempt (HTTP status 200-499, no challenge)."""

    endpoint_key: str
    endpoint_name: str
    url: str
    status_code: int
    content_type: str | None
    body: str
    identity: Identity
    user_agent: str
    referer: str
    retried: bool = False
    attempts: int = 1

    success = True

    @property
    def data(self) -> Any:
        """Body decoded as JSON where possible."""
        return decode_body(self.body, self.content_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "endpoint_key": self.endpoint_key,
            "name": self.endpoint_name,
            "url": self.url,
            "status_code": self.status_code,
            "content_type": self.content_type,
            "data": self.data,
            "session_id": self.identity.session_id,
            "user_agent": self.user_agent,
            "referer": self.referer,
            "retried": self.retried,
            "attempts": self.attempts,
        }


@dataclass(frozen=True)
class StockPageResult(FetchSuccess):
    """Landing page fetch with the HTML body replaced by its visible text."""

    symbol: str = ""
    exchange: str = ""

    @property
    def data(self) -> str:
        return self.body

    @classmethod
    def from_success(
        cls, result: FetchSuccess, text: str, symbol: str, exchange: str
    ) -> StockPageResult:
        return cls(
            endpoint_key=result.endpoint_key,
            endpoint_name=result.endpoint_name,
            url=result.url,
            status_code=result.status_code,
            content_type=result.content_type,
            body=text,
            identity=result.identity,
            user_agent=result.user_agent,
            referer=result.referer,
            retried=result.retried,
            attempts=result.attempts,
            symbol=symbol,
            exchange=exchange,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update(symbol=self.symbol, exchange=self.exchange)
        return payload


@dataclass(frozen=True)
class FetchFailure:
    """A terminal failed attempt."""

    endpoint_key: str
    endpoint_name: str
    url: str
    error_kind: str
    message: str
    status_code: int | None = None
    identity: Identity | None = None
    attempts: int = 1

    success = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "endpoint_key": self.endpoint_key,
            "name": self.endpoint_name,
            "url": self.url,
            "session_id": self.identity.session_id if self.identity else None,
            "attempts": self.attempts,
            "error": {
                "code": "API_REQUEST_FAILED",
                "kind": self.error_kind,
                "message": f"Failed to fetch data from {self.endpoint_name}",
                "details": self.message,
                "status_code": self.status_code,
                "url": self.url,
            },
        }


FetchResult = Union[FetchSuccess, FetchFailure]


@dataclass(frozen=True)
class AggregateReport:
    """Outcome of every JSON endpoint of one stock, in catalogue order."""

    symbol: str
    exchange: str
    timestamp: datetime
    successful: tuple[FetchSuccess, ...]
    failed: tuple[FetchFailure, ...]

    @property
    def attempted(self) -> int:
        return len(self.successful) + len(self.failed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "exchange": self.exchange,
            "timestamp": self.timestamp.isoformat(),
            "successful": [result.to_dict() for result in self.successful],
            "failed": [result.to_dict() for result in self.failed],
        }


@dataclass(frozen=True)
class StockDataReport:
    """Everything fetched for one stock.

    `success` is True when the page or at least one JSON endpoint succeeded;
    callers inspect `api_data.successful`/`api_data.failed` for partial results.
    A branch that crashed outright is None.
    """

    success: bool
    symbol: str
    exchange: str
    timestamp: datetime
    stock_page: StockPageResult | FetchFailure | None
    api_data: AggregateReport | None
    error: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "symbol": self.symbol,
            "exchange": self.exchange,
            "timestamp": self.timestamp.isoformat(),
            "stock_page": self.stock_page.to_dict() if self.stock_page else None,
            "api_data": self.api_data.to_dict() if self.api_data else None,
        }
        if self.error:
            payload["error"] = self.error
        return payload
