"""Main FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockbrief.api.config import get_api_settings
from stockbrief.api.dependencies import get_zerodha_service
from stockbrief.api.middleware import add_cors_middleware, add_trace_middleware, limiter
from stockbrief.api.routers import analysis, stock
from stockbrief.core.errors import PromptError, ValidationError
from stockbrief.utils.logger import get_logger

logger = get_logger(__name__)


def _error(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code, "message": message, "details": details},
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Stockbrief API")

    yield

    logger.info("Shutting down Stockbrief API")
    if get_zerodha_service.cache_info().currsize:
        await get_zerodha_service().aclose()
        get_zerodha_service.cache_clear()


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_api_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Stockbrief API fetches Zerodha Markets data for a stock and turns it
        into an investment analysis prompt:

        - **Stock Data**: Landing page text plus financials, peers, price,
          revenue mix and shareholdings JSON
        - **Analysis**: Prompt generation tailored to an investor profile

        ## Rate Limiting

        POST requests are rate-limited per IP address (10 per minute by default).
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Add middleware
    add_cors_middleware(app)
    add_trace_middleware(app)
    app.state.limiter = limiter

    # Add routers with API prefix
    app.include_router(stock.router, prefix=settings.api_prefix)
    app.include_router(analysis.router, prefix=settings.api_prefix)

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "docs": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        }

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "stockbrief-api",
            "version": settings.api_version,
        }

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        """Reject invalid request bodies with every problem listed."""
        return JSONResponse(status_code=400, content={"success": False, "error": exc.to_dict()})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Report malformed JSON bodies the same way as invalid fields."""
        details = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return _error(400, "VALIDATION_ERROR", "Invalid input data", details)

    @app.exception_handler(PromptError)
    async def prompt_error_handler(request: Request, exc: PromptError):
        """Report prompt assembly failures."""
        logger.warning("Prompt generation failed", error=exc.message)
        return _error(400, exc.code, "Failed to generate analysis prompt", exc.message)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        """Throttle clients over the per-IP limit."""
        return _error(
            429,
            "RATE_LIMIT_EXCEEDED",
            "Too many requests. Please try again later.",
            f"Rate limit: {exc.detail}",
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render routing errors in the shared error envelope."""
        if exc.status_code == 404:
            return _error(
                404, "NOT_FOUND", "Endpoint not found", f"{request.method} {request.url.path}"
            )
        return _error(exc.status_code, "HTTP_ERROR", str(exc.detail))

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=True)
        return _error(
            500,
            "INTERNAL_SERVER_ERROR",
            "An internal server error occurred",
            str(exc) if settings.debug else None,
        )

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_api_settings()

    uvicorn.run(
        "stockbrief.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
