"""Bot-challenge page detection."""

from typing import Any

CHALLENGE_MARKERS: tuple[str, ...] = (
    "Just a moment...",
    "Enable JavaScript and cookies to continue",
    "Checking your browser",
    "cf-browser-verification",
)


def is_challenge(body: Any) -> bool:
    """Return True when a response body is an anti-bot challenge page.

    Only text bodies are inspected; decoded JSON, bytes and None are never
    challenges.
    """
    if not isinstance(body, str):
        return False
    return any(marker in body for marker in CHALLENGE_MARKERS)
