"""Analysis prompt assembly."""

from .generator import PromptGenerator, PromptResult, filter_historical_data_to_last_two_years
from .template import BASE_PROMPT, INVESTOR_PROFILES, PLACEHOLDERS

__all__ = [
    "PromptGenerator",
    "PromptResult",
    "filter_historical_data_to_last_two_years",
    "BASE_PROMPT",
    "INVESTOR_PROFILES",
    "PLACEHOLDERS",
]
