"""Unified application configuration with environment support.

Configuration hierarchy:
    1. Environment variables (highest priority)
    2. .env file
    3. Built-in defaults
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


# ============================================================================
# Data Source Configuration
# ============================================================================


class ZerodhaConfig(BaseSettings):
    """Zerodha Markets data source configuration."""

    base_url: str = Field(
        default="https://zerodha.com",
        description="Zerodha site root",
    )
    stock_page_path: str = Field(
        default="/markets/stocks/{exchange}/{symbol}/",
        description="Stock landing page path template; JSON endpoints hang off it",
    )

    model_config = SettingsConfigDict(env_prefix="ZERODHA_", extra="allow")

    def stock_page_url(self, symbol: str, exchange: str) -> str:
        """Build the landing page URL for a stock."""
        path = self.stock_page_path.format(exchange=exchange, symbol=symbol)
        return self.base_url.rstrip("/") + path


# ============================================================================
# Scraper Configuration
# ============================================================================


class ScraperConfig(BaseSettings):
    """Fetch layer behavior configuration."""

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-attempt HTTP timeout in seconds",
    )
    max_redirects: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Maximum redirect hops followed per request",
    )
    verify_tls: bool = Field(
        default=False,
        description=(
            "Validate the source's TLS certificate chain. Off by default: the "
            "source chain is accepted as untrusted"
        ),
    )
    max_rate_limit_retries: int = Field(
        default=1,
        ge=0,
        le=1,
        description="Retries after an HTTP 429 (at most one)",
    )

    model_config = SettingsConfigDict(env_prefix="SCRAPER_", extra="allow")


# ============================================================================
# Observability Configuration
# ============================================================================


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    format: str = Field(
        default="json",
        description="Log format (json, console)",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        v_lower = v.lower()
        if v_lower not in {"json", "console"}:
            raise ValueError(f"Invalid log format: {v}. Must be 'json' or 'console'")
        return v_lower

    model_config = SettingsConfigDict(env_prefix="LOG_", extra="allow")


class MetricsConfig(BaseSettings):
    """Prometheus metrics configuration."""

    enabled: bool = Field(default=False, description="Expose a metrics endpoint")
    port: int = Field(default=9090, ge=1024, le=65535, description="Metrics server port")

    model_config = SettingsConfigDict(env_prefix="METRICS_", extra="allow")


# ============================================================================
# Unified Application Configuration
# ============================================================================


class AppConfig(BaseSettings):
    """Master configuration for stockbrief.

    All sub-configurations are included here for easy access:
        config.zerodha.base_url
        config.scraper.timeout
        config.logging.level
    """

    environment: Environment = Field(default=Environment.DEV)

    zerodha: ZerodhaConfig = Field(default_factory=ZerodhaConfig)
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def is_dev(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEV

    def is_prod(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PROD


# Global configuration instance
config = AppConfig()


def get_config() -> AppConfig:
    """Get the global application configuration.

    Returns:
        AppConfig instance
    """
    return config


def reload_config() -> AppConfig:
    """Reload configuration from environment.

    Useful for testing or dynamic configuration changes.

    Returns:
        New AppConfig instance
    """
    global config
    config = AppConfig()
    return config
