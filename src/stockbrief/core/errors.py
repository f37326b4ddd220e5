"""Stockbrief error hierarchy.

Provides domain-specific exceptions with recovery strategies.
"""

from __future__ import annotations
from typing import Optional


class StockBriefError(Exception):
    """Base exception for all stockbrief errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for logging/monitoring
        retryable: Whether operation can be safely retried
        recovery_hint: Suggested recovery action
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        retryable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.retryable = retryable
        self.recovery_hint = recovery_hint
        super().__init__(message)

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.recovery_hint:
            base += f" ({self.recovery_hint})"
        return base

    def to_dict(self) -> dict:
        """Render as the `{code, message, details}` error body used by the API."""
        return {"code": self.code, "message": self.message, "details": self.recovery_hint}


class ValidationError(StockBriefError):
    """Raised when user input fails validation.

    Examples:
        - Symbol with punctuation
        - Unknown exchange
    """

    def __init__(
        self,
        message: str,
        details: Optional[list[str]] = None,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            retryable=False,
            recovery_hint=recovery_hint or "Review symbol and exchange",
        )
        self.details = details or []

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class IntegrationError(StockBriefError):
    """Raised on external integration failures.

    Examples:
        - HTTP request failures
        - Bot-challenge pages
    """

    def __init__(
        self,
        service: str,
        message: str,
        code: str = "INTEGRATION_ERROR",
        retryable: bool = True,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(
            f"{service}: {message}",
            code=code,
            retryable=retryable,
            recovery_hint=recovery_hint or f"Check {service} connectivity",
        )
        self.service = service


class ConfigError(StockBriefError):
    """Raised on configuration errors."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        super().__init__(
            message,
            code="CONFIG_ERROR",
            retryable=False,
            recovery_hint=recovery_hint or "Check environment variables and config files",
        )


class PromptError(StockBriefError):
    """Raised when an analysis prompt cannot be assembled."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        super().__init__(
            message,
            code="PROMPT_GENERATION_FAILED",
            retryable=False,
            recovery_hint=recovery_hint,
        )
