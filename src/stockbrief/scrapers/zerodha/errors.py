"""Failure taxonomy of the Zerodha fetch layer.

These exceptions only travel between the transport and the orchestrator.
`ZerodhaService` converts every one of them into a `FetchFailure` value, so
none of them reaches callers of the service.
"""

from __future__ import annotations

from typing import Optional

from stockbrief.core.errors import IntegrationError

SERVICE_NAME = "zerodha"


class ErrorKind:
    """Machine-readable failure kinds recorded on `FetchFailure`."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    RATE_LIMITED = "rate_limited"
    CHALLENGE = "challenge"
    ENDPOINT_ERROR = "endpoint_error"


class FetchError(IntegrationError):
    """Base class for a single failed fetch attempt.

    Attributes:
        kind: One of the `ErrorKind` values
        url: Requested URL
        status_code: HTTP status when a response was received
    """

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        retryable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(
            SERVICE_NAME,
            message,
            code="API_REQUEST_FAILED",
            retryable=retryable,
            recovery_hint=recovery_hint,
        )
        self.url = url
        self.status_code = status_code


class NetworkError(FetchError):
    """DNS, connection, redirect-loop or decoding failure."""

    kind = ErrorKind.NETWORK


class FetchTimeoutError(FetchError):
    """The attempt exceeded the transport timeout."""

    kind = ErrorKind.TIMEOUT


class ServerError(FetchError):
    """The source answered with a 5xx status."""

    kind = ErrorKind.SERVER_ERROR


class RateLimited(FetchError):
    """The source answered 429; eligible for a single retry with a fresh identity."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str, url: Optional[str] = None, status_code: int = 429):
        super().__init__(
            message,
            url=url,
            status_code=status_code,
            retryable=True,
            recovery_hint="Rotate identity and retry once",
        )


class ChallengeDetected(FetchError):
    """The source served a bot-challenge page instead of content."""

    kind = ErrorKind.CHALLENGE
