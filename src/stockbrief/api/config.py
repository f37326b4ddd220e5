"""API Configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = Field(default="Stockbrief API", description="API title")
    api_version: str = Field(default="1.0.0", description="API version")
    api_prefix: str = Field(default="/api", description="API prefix")

    # Server Settings
    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=5000, description="API port")
    debug: bool = Field(default=False, description="Include exception text in 500 responses")

    # CORS Settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5000"],
        description="Allowed CORS origins",
    )

    # Rate Limiting
    rate_limit_per_minute: int = Field(
        default=10, ge=1, description="POST requests per minute per client IP"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STOCKBRIEF_",
        case_sensitive=False,
        extra="ignore",
    )


def get_api_settings() -> APISettings:
    """Get API settings instance."""
    return APISettings()
