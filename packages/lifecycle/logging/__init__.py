"""Structured diagnostic logging for the lifecycle producer.

Wraps Python's ``logging`` module with stdout defaults and contextvars-based
context propagation.
"""

from .config import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from .context import (
    bind_context,
    clear_context,
    get_context,
    log_context,
    reset_context,
)

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "configure_logging_from_settings",
    "ContextFilter",
    "get_context",
    "get_logger",
    "JsonFormatter",
    "log_context",
    "PlainFormatter",
    "reset_context",
]
