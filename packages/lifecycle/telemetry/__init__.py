"""Tracing and metrics collaborators for the lifecycle producer."""

from .attributes import counter_name, event_attributes, histogram_name
from .otel import OtelSpanHandle, OtelTelemetry
from .protocol import Attributes, NoopTelemetry, SpanHandle, Telemetry

__all__ = [
    "Attributes",
    "NoopTelemetry",
    "OtelSpanHandle",
    "OtelTelemetry",
    "SpanHandle",
    "Telemetry",
    "counter_name",
    "event_attributes",
    "histogram_name",
]
