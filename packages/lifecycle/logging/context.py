"""Contextvars-backed fields attached to every diagnostic log record.

Values are stored as strings so JSON and plain output share one shape.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Iterator, Mapping

_LOG_CONTEXT: ContextVar[Mapping[str, str]] = ContextVar(
    "lifecycle_log_context", default={}
)


def _merged(values: Mapping[str, object]) -> dict[str, str]:
    merged = dict(_LOG_CONTEXT.get())
    merged.update(
        (str(key), str(value)) for key, value in values.items() if value is not None
    )
    return merged


def get_context() -> dict[str, str]:
    """Return a copy of the fields bound in the current context."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> Token[Mapping[str, str]]:
    """Bind fields until cleared; ``None`` values are skipped.

    The returned token restores the previous fields via ``reset_context``.
    """
    return _LOG_CONTEXT.set(_merged(values))


def reset_context(token: Token[Mapping[str, str]]) -> None:
    _LOG_CONTEXT.reset(token)


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when no names are given."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    _LOG_CONTEXT.set(
        {key: value for key, value in _LOG_CONTEXT.get().items() if key not in keys}
    )


@contextmanager
def log_context(
    values: Mapping[str, object] | None = None, **extra: object
) -> Iterator[None]:
    """Bind fields for the duration of a block."""
    token = bind_context(**{**dict(values or {}), **extra})
    try:
        yield
    finally:
        reset_context(token)
