"""Zerodha Markets fetch layer."""

from .challenge import CHALLENGE_MARKERS, is_challenge
from .endpoints import EndpointSpec, api_endpoints, stock_page_endpoint
from .errors import (
    ChallengeDetected,
    ErrorKind,
    FetchError,
    FetchTimeoutError,
    NetworkError,
    RateLimited,
    ServerError,
)
from .examples import EXAMPLE_STOCKS
from .identity import Identity, IdentityRotator
from .models import (
    AggregateReport,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    StockDataReport,
    StockPageResult,
)
from .request_builder import PreparedRequest, browser_profile, build_request
from .service import ZerodhaService
from .transport import Transport

__all__ = [
    "ZerodhaService",
    "Transport",
    "Identity",
    "IdentityRotator",
    "PreparedRequest",
    "build_request",
    "browser_profile",
    "is_challenge",
    "CHALLENGE_MARKERS",
    "EndpointSpec",
    "api_endpoints",
    "stock_page_endpoint",
    "EXAMPLE_STOCKS",
    # Results
    "FetchSuccess",
    "FetchFailure",
    "FetchResult",
    "StockPageResult",
    "AggregateReport",
    "StockDataReport",
    # Errors
    "ErrorKind",
    "FetchError",
    "NetworkError",
    "FetchTimeoutError",
    "ServerError",
    "RateLimited",
    "ChallengeDetected",
]
