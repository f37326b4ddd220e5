"""Configuration re-exports.

`from stockbrief.config import config` gives the process-wide settings object.
"""

from stockbrief.core import (
    AppConfig,
    Environment,
    get_config,
    reload_config,
)

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "Environment",
    "config",
]

config = get_config()
