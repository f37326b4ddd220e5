"""Utils package."""

from .logger import configure_logging, get_logger, get_trace_id, set_trace_id, stock_context

__all__ = ["configure_logging", "get_logger", "get_trace_id", "set_trace_id", "stock_context"]
