"""Structured logging for stockbrief.

Every log line can carry three layers of context:

- the API trace ID (one per HTTP request, set by the trace middleware),
- the stock being fetched (`symbol`/`exchange`, bound for the duration of one
  complete fetch with `stock_context`),
- whatever the logger itself was created with (`get_logger(__name__, scraper="zerodha")`).

Logs go to stderr; stdout belongs to CLI output such as `stockbrief fetch --json`.
"""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, Processor, WrappedLogger

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

_trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)


def set_trace_id(trace_id: str | None = None) -> str:
    """Set the trace ID for the current context, minting a UUID when none is given."""
    if not trace_id:
        trace_id = str(uuid.uuid4())
    _trace_id_var.set(trace_id)
    return trace_id


def get_trace_id() -> str | None:
    return _trace_id_var.get()


def clear_trace_id() -> None:
    _trace_id_var.set(None)


def add_trace_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor adding `trace_id` when a request is in flight."""
    trace_id = get_trace_id()
    if trace_id is not None:
        event_dict.setdefault("trace_id", trace_id)
    return event_dict


@contextmanager
def stock_context(symbol: str, exchange: str) -> Iterator[None]:
    """Tag every log line emitted inside the block with the stock being fetched.

    Tasks started inside the block (e.g. by `asyncio.gather`) inherit the tags.
    """
    with structlog.contextvars.bound_contextvars(symbol=symbol, exchange=exchange):
        yield


def get_logger(name: str, **context: Any) -> FilteringBoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (typically __name__)
        **context: Key/value pairs attached to every line from this logger

    Returns:
        structlog logger
    """
    return structlog.get_logger(name, **context)


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Configure application-wide logging.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_format: 'json' or 'console'

    Raises:
        ValueError: If log_level is not a valid logging level
    """
    level_name = log_level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log_level '{log_level}'. Must be one of: {', '.join(LOG_LEVELS)}"
        )
    level = getattr(logging, level_name)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    # Drop per-request INFO lines from the HTTP client
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_trace_id,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
