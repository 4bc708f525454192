"""Tests for structured diagnostic logging helpers."""

from __future__ import annotations

import io
import json
import logging
import sys
from typing import Iterator

import pytest

from packages.lifecycle.logging import (
    JsonFormatter,
    PlainFormatter,
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_context,
    get_logger,
    log_context,
    reset_context,
)
from packages.lifecycle.config import LoggingSettings


@pytest.fixture(autouse=True)
def _isolated_logging() -> Iterator[None]:
    """Restore root handlers and clear bound context around each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    clear_context()
    yield
    clear_context()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_bind_and_clear_context() -> None:
    """Bound values are stringified, ``None`` ignored, and keys clearable."""
    bind_context(event_type="service.started", attempt=2, skipped=None)

    assert get_context() == {"event_type": "service.started", "attempt": "2"}

    clear_context("attempt")
    assert get_context() == {"event_type": "service.started"}


def test_log_context_is_scoped_to_block() -> None:
    """Values bound by ``log_context`` disappear when the block exits."""
    bind_context(service="orders")

    with log_context({"stage": "write"}):
        assert get_context() == {"service": "orders", "stage": "write"}

    assert get_context() == {"service": "orders"}


def test_configure_logging_emits_json_with_context() -> None:
    """JSON output carries core fields plus the bound context."""
    stream = io.StringIO()
    configure_logging(level="INFO", json_output=True, service="orders", stream=stream)

    with log_context({"stage": "write"}):
        get_logger("packages.lifecycle.test").warning("Lifecycle event emission failed")

    payload = json.loads(stream.getvalue())
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "packages.lifecycle.test"
    assert payload["message"] == "Lifecycle event emission failed"
    assert payload["service"] == "orders"
    assert payload["stage"] == "write"


def test_configure_logging_replaces_existing_handlers() -> None:
    """Repeated configuration never duplicates output."""
    stream = io.StringIO()
    configure_logging(stream=stream)
    configure_logging(stream=stream)

    get_logger("packages.lifecycle.test").info("hello")

    assert stream.getvalue().count("hello") == 1


def test_plain_formatter_appends_sorted_context() -> None:
    """Plain output appends ``key=value`` pairs after the message."""
    record = logging.LogRecord(
        "packages.lifecycle.test", logging.INFO, __file__, 1, "hello", None, None
    )
    record.lifecycle_context = {"stage": "write", "event_type": "service.started"}

    line = PlainFormatter().format(record)

    assert line.endswith("hello event_type=service.started stage=write")


def test_json_formatter_includes_exception_text() -> None:
    """Exception info is rendered into the JSON payload."""
    try:
        raise OSError("disk full")
    except OSError:
        record = logging.LogRecord(
            "packages.lifecycle.test",
            logging.ERROR,
            __file__,
            1,
            "write failed",
            None,
            sys.exc_info(),
        )

    payload = json.loads(JsonFormatter().format(record))

    assert "OSError: disk full" in payload["exception"]


def test_bind_context_token_restores_previous_fields() -> None:
    """Resetting the returned token undoes exactly one bind."""
    bind_context(service="orders")
    token = bind_context(stage="span")

    reset_context(token)

    assert get_context() == {"service": "orders"}


def test_static_fields_yield_to_bound_context() -> None:
    """Bound context overrides formatter-level static fields of the same name."""
    record = logging.LogRecord(
        "packages.lifecycle.test", logging.INFO, __file__, 1, "hello", None, None
    )
    record.lifecycle_context = {"service": "billing"}

    payload = json.loads(
        JsonFormatter({"service": "orders", "environment": "prod"}).format(record)
    )

    assert payload["service"] == "billing"
    assert payload["environment"] == "prod"


def test_configure_logging_from_settings_uses_plain_output() -> None:
    """Settings drive level and formatter selection."""
    handler = configure_logging_from_settings(
        LoggingSettings(level="WARNING", json_output=False, service="orders")
    )

    assert handler.level == logging.WARNING
    assert isinstance(handler.formatter, PlainFormatter)
    assert logging.getLogger().level == logging.WARNING
