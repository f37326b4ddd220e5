"""Stock data endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from stockbrief.api.dependencies import get_zerodha_service
from stockbrief.api.middleware import limiter, rate_limit
from stockbrief.api.schemas import (
    ErrorResponse,
    ExamplesResponse,
    FetchSummary,
    ServiceHealth,
    StockData,
    StockFetchRequest,
    StockFetchResponse,
)
from stockbrief.scrapers.zerodha import EXAMPLE_STOCKS, ZerodhaService
from stockbrief.utils.logger import get_logger
from stockbrief.validation import validate_stock_request

logger = get_logger(__name__)

router = APIRouter(prefix="/stock", tags=["Stock Data"])


@router.post(
    "/fetch",
    response_model=StockFetchResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
@limiter.limit(rate_limit)
async def fetch_stock(
    request: Request,
    payload: StockFetchRequest,
    service: ZerodhaService = Depends(get_zerodha_service),
):
    """Fetch the landing page and every JSON endpoint for one stock.

    Partial results are a success; the response is 400 only when nothing at
    all could be fetched.

    Example:
        POST /api/stock/fetch
        {"symbol": "RELIANCE", "exchange": "NSE"}
    """
    symbol, exchange, company_name = validate_stock_request(
        payload.symbol, payload.exchange, payload.company_name
    )
    logger.info("Fetching stock data", symbol=symbol, exchange=exchange, company_name=company_name)

    report = await service.fetch_complete_stock_data(symbol, exchange)

    if not report.success:
        logger.warning("No stock data fetched", symbol=symbol, error=report.error)
        return JSONResponse(status_code=400, content=report.to_dict())

    api_data = report.api_data
    logger.info(
        "Stock data fetched",
        symbol=symbol,
        successful=len(api_data.successful) if api_data else 0,
        failed=len(api_data.failed) if api_data else 0,
    )
    return StockFetchResponse(
        data=StockData(
            symbol=report.symbol,
            exchange=report.exchange,
            timestamp=report.timestamp,
            stock_page=report.stock_page.to_dict() if report.stock_page else None,
            api_data=ZerodhaService.format_api_data(api_data),
        ),
        summary=FetchSummary(
            total_endpoints=len(api_data.successful) if api_data else 0,
            failed_endpoints=len(api_data.failed) if api_data else 0,
            has_stock_page=bool(report.stock_page and report.stock_page.success),
        ),
    )


@router.get("/examples", response_model=ExamplesResponse)
async def get_examples() -> ExamplesResponse:
    """Example ticker symbols for each exchange."""
    return ExamplesResponse(data=EXAMPLE_STOCKS)


@router.get("/health", response_model=ServiceHealth)
async def stock_health() -> ServiceHealth:
    """Health check for the stock service."""
    return ServiceHealth(service="Stock Service", timestamp=datetime.now(timezone.utc))
