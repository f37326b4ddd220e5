"""Reduce an HTML page to the visible text embedded in analysis prompts."""

import re

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")


def extract_page_text(html: str) -> str:
    """Strip script/style subtrees and collapse whitespace.

    Malformed markup degrades to best-effort text; this never raises.

    Args:
        html: Raw HTML document

    Returns:
        Visible text with whitespace runs collapsed to single spaces
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    return _WHITESPACE.sub(" ", soup.get_text()).strip()
