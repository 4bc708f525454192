"""Error types raised when a lifecycle event cannot be emitted.

These are plain (non-frozen) dataclasses: ``contextlib`` assigns
``__traceback__`` on exceptions leaving a ``@contextmanager`` block.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class EmissionError(Exception):
    """Base error for a failed emission."""

    message: str
    event_type: str = ""

    def __str__(self) -> str:
        """Return human-readable error message."""
        return self.message


@dataclass(eq=False)
class SerializationError(EmissionError):
    """The event could not be encoded as a JSON record."""


@dataclass(eq=False)
class SinkWriteError(EmissionError):
    """A sink failed while writing or rendering the event."""

    sink: str = ""
