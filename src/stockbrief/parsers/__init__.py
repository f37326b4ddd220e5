"""Parsers turning fetched documents into prompt-ready content."""

from .page_text import extract_page_text

__all__ = ["extract_page_text"]
