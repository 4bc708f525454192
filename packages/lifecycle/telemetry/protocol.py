"""Call contract between the producer and a tracing/metrics backend."""

from __future__ import annotations

from typing import Mapping, Protocol

from opentelemetry.context import Context

AttributeValue = str | bool | int | float
Attributes = Mapping[str, AttributeValue]


class SpanHandle(Protocol):
    """Handle for one open span."""

    def close(self) -> None:
        """End the span."""


class Telemetry(Protocol):
    """Tracing/metrics collaborator consulted once per emission."""

    def start_span(
        self, context: Context | None, name: str, attributes: Attributes
    ) -> tuple[Context | None, SpanHandle]:
        """Open a span under ``context`` and return the child context."""

    def record_counter(self, name: str, delta: int, attributes: Attributes) -> None:
        """Add ``delta`` to the monotonic counter ``name``."""

    def record_histogram(
        self, name: str, value_seconds: float, attributes: Attributes
    ) -> None:
        """Record one duration sample, in seconds, on histogram ``name``."""


class _NoopSpan:
    def close(self) -> None:
        return


class NoopTelemetry:
    """Telemetry collaborator that records nothing."""

    def start_span(
        self, context: Context | None, name: str, attributes: Attributes
    ) -> tuple[Context | None, SpanHandle]:
        del name, attributes
        return context, _NoopSpan()

    def record_counter(self, name: str, delta: int, attributes: Attributes) -> None:
        del name, delta, attributes

    def record_histogram(
        self, name: str, value_seconds: float, attributes: Attributes
    ) -> None:
        del name, value_seconds, attributes

