"""Core infrastructure shared by all stockbrief packages.

- Configuration management
- Error handling
"""

from .config import AppConfig, Environment, get_config, reload_config
from .errors import (
    ConfigError,
    IntegrationError,
    PromptError,
    StockBriefError,
    ValidationError,
)

__all__ = [
    # Config
    "AppConfig",
    "get_config",
    "reload_config",
    "Environment",
    # Errors
    "StockBriefError",
    "ValidationError",
    "IntegrationError",
    "ConfigError",
    "PromptError",
]
