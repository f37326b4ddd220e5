"""API dependencies for dependency injection."""

from functools import lru_cache

from stockbrief.prompts import PromptGenerator
from stockbrief.scrapers.zerodha import ZerodhaService


@lru_cache
def get_zerodha_service() -> ZerodhaService:
    """Get the process-wide fetch service.

    One instance is shared so identity rotation and the connection pool
    carry over between requests. Closed by the application lifespan.
    """
    return ZerodhaService()


def get_prompt_generator() -> PromptGenerator:
    """Get a prompt generator instance."""
    return PromptGenerator()


__all__ = ["get_zerodha_service", "get_prompt_generator"]
