"""Analysis prompt endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from stockbrief.api.dependencies import get_prompt_generator
from stockbrief.api.middleware import limiter, rate_limit
from stockbrief.api.schemas import (
    AnalysisRequest,
    AnalysisResponse,
    CustomizationOptionsResponse,
    ErrorResponse,
    PromptData,
    ServiceHealth,
    TemplateData,
    TemplateResponse,
)
from stockbrief.prompts import PLACEHOLDERS, PromptGenerator
from stockbrief.utils.logger import get_logger
from stockbrief.validation import validate_analysis_request

logger = get_logger(__name__)

router = APIRouter(prefix="/analysis", tags=["Analysis"])


@router.post(
    "/generate",
    response_model=AnalysisResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
@limiter.limit(rate_limit)
async def generate_analysis(
    request: Request,
    payload: AnalysisRequest,
    generator: PromptGenerator = Depends(get_prompt_generator),
):
    """Build an analysis prompt from data returned by `/stock/fetch`.

    Example:
        POST /api/analysis/generate
        {"symbol": "RELIANCE", "stock_data": {...}, "customizations": {"investor_type": "experienced"}}
    """
    symbol, stock_data, customizations = validate_analysis_request(
        payload.symbol, payload.stock_data, payload.customizations
    )
    logger.info("Generating analysis prompt", symbol=symbol)

    errors = generator.validate_stock_data(stock_data)
    if errors:
        logger.warning("Invalid stock data", symbol=symbol, errors=errors)
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": {
                    "code": "INVALID_STOCK_DATA",
                    "message": "Invalid stock data provided",
                    "details": errors,
                },
            },
        )

    # PromptError is rendered by the application's exception handler
    result = generator.generate_prompt(symbol, stock_data, customizations)
    return AnalysisResponse(data=PromptData(**result.to_dict()))


@router.get("/template", response_model=TemplateResponse)
async def get_template(
    generator: PromptGenerator = Depends(get_prompt_generator),
) -> TemplateResponse:
    """The base prompt template with its placeholders unfilled."""
    return TemplateResponse(
        data=TemplateData(
            template=generator.load_base_prompt(),
            description="Base investment analysis prompt template",
            placeholders=[f"${name}" for name in PLACEHOLDERS],
        )
    )


@router.get("/customization-options", response_model=CustomizationOptionsResponse)
async def get_customization_options() -> CustomizationOptionsResponse:
    """Investor types, salary ranges, and risk levels accepted by `/generate`."""
    return CustomizationOptionsResponse(data=PromptGenerator.customization_options())


@router.get("/health", response_model=ServiceHealth)
async def analysis_health() -> ServiceHealth:
    """Health check for the analysis service."""
    return ServiceHealth(service="Analysis Service", timestamp=datetime.now(timezone.utc))
