"""Ambient per-request emission context.

Request handlers bind the correlation id and client details once; emit calls
that do not take them explicitly read them from here.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

_CORRELATION_ID: ContextVar[str] = ContextVar("lifecycle_correlation_id", default="")
_USER_AGENT: ContextVar[str] = ContextVar("lifecycle_user_agent", default="")
_REMOTE_ADDR: ContextVar[str] = ContextVar("lifecycle_remote_addr", default="")


def current_correlation_id() -> str:
    return _CORRELATION_ID.get()


def current_user_agent() -> str:
    return _USER_AGENT.get()


def current_remote_addr() -> str:
    return _REMOTE_ADDR.get()


@contextmanager
def emission_context(
    *,
    correlation_id: str | None = None,
    user_agent: str | None = None,
    remote_addr: str | None = None,
) -> Iterator[None]:
    """Bind request details for the duration of a block.

    Arguments left as ``None`` keep the enclosing value.
    """
    tokens = []
    if correlation_id is not None:
        tokens.append((_CORRELATION_ID, _CORRELATION_ID.set(correlation_id)))
    if user_agent is not None:
        tokens.append((_USER_AGENT, _USER_AGENT.set(user_agent)))
    if remote_addr is not None:
        tokens.append((_REMOTE_ADDR, _REMOTE_ADDR.set(remote_addr)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
