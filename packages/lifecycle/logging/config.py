"""Root logging setup for processes that embed the lifecycle producer.

Only the producer's own diagnostics (``packages.lifecycle.*`` loggers) flow
through here. Lifecycle events are written by the output sinks, never logged.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, Mapping, TextIO

from . import fields
from .context import get_context

_CONTEXT_ATTR = "lifecycle_context"


class ContextFilter(logging.Filter):
    """Copy the bound context fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        setattr(record, _CONTEXT_ATTR, get_context())
        return True


def _record_context(record: logging.LogRecord) -> dict[str, str]:
    context = getattr(record, _CONTEXT_ATTR, None)
    return context if isinstance(context, dict) else {}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: core fields, static fields, then context."""

    def __init__(self, static_fields: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self._static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
            **self._static_fields,
            **_record_context(record),
        }
        if record.exc_info:
            payload[fields.EXCEPTION] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """``timestamp LEVEL logger message key=value ...`` lines."""

    def __init__(self, static_fields: Mapping[str, str] | None = None) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        self._static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = {**self._static_fields, **_record_context(record)}
        if not context:
            return message
        suffix = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{message} {suffix}"


def configure_logging(
    *,
    level: str = "INFO",
    json_output: bool = True,
    service: str | None = None,
    environment: str | None = None,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install a single root stream handler and return it.

    Existing root handlers are replaced so repeated calls never duplicate
    output. ``service`` and ``environment`` are stamped on every record.
    """
    static_fields: dict[str, str] = {}
    if service:
        static_fields[fields.SERVICE] = service
    if environment:
        static_fields[fields.ENVIRONMENT] = environment

    handler = logging.StreamHandler(stream=stream if stream is not None else sys.stdout)
    handler.setLevel(level.upper())
    handler.addFilter(ContextFilter())
    handler.setFormatter(
        JsonFormatter(static_fields) if json_output else PlainFormatter(static_fields)
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())
    root.addHandler(handler)
    return handler


def configure_logging_from_settings(settings: Any) -> logging.Handler:
    """Apply a ``LoggingSettings``-shaped object."""
    return configure_logging(
        level=settings.level,
        json_output=settings.json_output,
        service=settings.service,
        environment=settings.environment,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)
