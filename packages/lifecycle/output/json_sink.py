"""Newline-delimited JSON record sink."""

from __future__ import annotations

import json
from typing import TextIO

from packages.lifecycle.errors import SerializationError, SinkWriteError
from packages.lifecycle.events import LifecycleEvent


def encode_event(event: LifecycleEvent) -> str:
    """Return the compact single-line JSON encoding of ``event``."""
    try:
        return json.dumps(
            event.to_record(), separators=(",", ":"), ensure_ascii=False
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(
            message=f"failed to serialize {event.event_type} event: {exc}",
            event_type=event.event_type,
        ) from exc


class JsonRecordSink:
    """Write one JSON record per line to a text stream."""

    name = "json"

    def __init__(self, writer: TextIO) -> None:
        self._writer = writer

    @property
    def writer(self) -> TextIO:
        return self._writer

    def write(self, event: LifecycleEvent) -> None:
        """Serialize ``event`` and write it as one line.

        Raises ``SerializationError`` when the record cannot be encoded and
        ``SinkWriteError`` when the writer fails. Nothing is written when
        encoding fails.
        """
        self.write_line(encode_event(event), event_type=event.event_type)

    def write_line(self, line: str, *, event_type: str = "") -> None:
        try:
            self._writer.write(line + "\n")
            flush = getattr(self._writer, "flush", None)
            if flush is not None:
                flush()
        except (OSError, ValueError) as exc:
            raise SinkWriteError(
                message=f"failed to write {event_type or 'lifecycle'} event: {exc}",
                event_type=event_type,
                sink=self.name,
            ) from exc
