"""Base scraper class."""

from abc import ABC, abstractmethod
from typing import Any

from stockbrief.utils.logger import get_logger

logger = get_logger(__name__)


class BaseScraper(ABC):
    """Base class for all scrapers."""

    def __init__(self, name: str):
        """Initialize scraper.

        Args:
            name: Scraper name for logging/metrics
        """
        self.name = name
        self.logger = get_logger(f"{__name__}.{name}", scraper=name)

    @abstractmethod
    async def scrape(self, *args: Any, **kwargs: Any) -> Any:
        """Scrape data from source.

        Must be implemented by subclasses.
        """
