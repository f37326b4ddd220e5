"""API middleware."""

from collections.abc import Callable

from fastapi import Request, Response
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

from stockbrief.api.config import get_api_settings
from stockbrief.utils.logger import clear_trace_id, get_logger, set_trace_id

logger = get_logger(__name__)

TRACE_HEADER = "X-Request-ID"

# Rate limiter, applied per route with `@limiter.limit(rate_limit)`
limiter = Limiter(key_func=get_remote_address)


def rate_limit() -> str:
    """Per-IP limit string for the POST routes, e.g. ``"10/minute"``."""
    return f"{get_api_settings().rate_limit_per_minute}/minute"


def add_cors_middleware(app) -> None:
    """Add CORS middleware to the application.

    Args:
        app: FastAPI application instance
    """
    settings = get_api_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


class TraceMiddleware(BaseHTTPMiddleware):
    """Tag every log line of a request with one trace ID.

    Reuses the caller's `X-Request-ID` when present and echoes it back.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = set_trace_id(request.headers.get(TRACE_HEADER))
        try:
            logger.info("Request received", method=request.method, path=request.url.path)
            response = await call_next(request)
            logger.info("Request completed", status_code=response.status_code)
            response.headers[TRACE_HEADER] = trace_id
            return response
        finally:
            clear_trace_id()


def add_trace_middleware(app) -> None:
    """Add trace ID middleware to the application.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(TraceMiddleware)


__all__ = [
    "limiter",
    "rate_limit",
    "add_cors_middleware",
    "add_trace_middleware",
    "TraceMiddleware",
]
