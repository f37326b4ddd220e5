"""Pydantic schemas for API request/response models.

Request bodies are typed loosely; `stockbrief.validation` checks them so
every problem is reported at once with a readable message.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


# Request Schemas
class StockFetchRequest(BaseModel):
    """Body of `POST /stock/fetch`."""

    symbol: Any = Field(None, description="Ticker symbol (e.g., RELIANCE)")
    exchange: Any = Field(None, description="BSE or NSE")
    company_name: Any = Field(None, description="Optional display name")


class AnalysisRequest(BaseModel):
    """Body of `POST /analysis/generate`."""

    symbol: Any = Field(None, description="Ticker symbol")
    stock_data: Any = Field(None, description="The `data` object returned by /stock/fetch")
    customizations: Any = Field(
        None, description="Optional `investor_type` and `salary` (monthly, rupees)"
    )


# Response Schemas
class ErrorDetail(BaseModel):
    """Error body shared by every failing route."""

    code: str
    message: str
    details: Any = None


class ErrorResponse(BaseModel):
    """Failed response envelope."""

    success: bool = False
    error: ErrorDetail


class FetchSummary(BaseModel):
    """Endpoint counts for a stock fetch."""

    total_endpoints: int
    failed_endpoints: int
    has_stock_page: bool


class StockData(BaseModel):
    """Fetched stock data in the shape `/analysis/generate` accepts."""

    symbol: str
    exchange: str
    timestamp: datetime
    stock_page: Optional[dict[str, Any]] = None
    api_data: dict[str, dict[str, Any]] = Field(default_factory=dict)


class StockFetchResponse(BaseModel):
    """Successful stock fetch."""

    success: bool = True
    data: StockData
    summary: FetchSummary


class PromptData(BaseModel):
    """Generated prompt."""

    prompt: str
    symbol: str
    timestamp: datetime
    options: dict[str, Any] = Field(default_factory=dict)


class AnalysisResponse(BaseModel):
    """Successful prompt generation."""

    success: bool = True
    data: PromptData


class TemplateData(BaseModel):
    """Base prompt template and its placeholders."""

    template: str
    description: str
    placeholders: list[str]


class TemplateResponse(BaseModel):
    success: bool = True
    data: TemplateData


class ExamplesResponse(BaseModel):
    success: bool = True
    data: dict[str, list[dict[str, str]]]


class CustomizationOptionsResponse(BaseModel):
    success: bool = True
    data: dict[str, list[dict[str, Any]]]


class ServiceHealth(BaseModel):
    """Per-router health check."""

    success: bool = True
    service: str
    status: str = "healthy"
    timestamp: datetime
