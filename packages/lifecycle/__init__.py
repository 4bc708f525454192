"""Structured lifecycle event producer.

Build typed service/API/database/resource lifecycle events, redact PII from
their payloads, record OpenTelemetry spans and metrics, and write them as
JSON records or styled terminal lines.
"""

from .colors import ColorRegistry
from .config import LifecycleSettings, load_settings, producer_from_settings
from .context import emission_context
from .errors import EmissionError, SerializationError, SinkWriteError
from .events import (
    Actor,
    ActorType,
    LifecycleEvent,
    Resource,
    Status,
    human_actor,
    new_actor,
    new_resource,
    parse_event,
    synthetic_actor,
    system_actor,
)
from .output import JsonRecordSink, StyledOutput
from .producer import Producer
from .redaction import FieldSensitivity, PiiDetector, Redactor
from .telemetry import NoopTelemetry, OtelTelemetry, Telemetry

__all__ = [
    "Actor",
    "ActorType",
    "ColorRegistry",
    "EmissionError",
    "FieldSensitivity",
    "JsonRecordSink",
    "LifecycleEvent",
    "LifecycleSettings",
    "NoopTelemetry",
    "OtelTelemetry",
    "PiiDetector",
    "Producer",
    "Redactor",
    "Resource",
    "SerializationError",
    "SinkWriteError",
    "Status",
    "StyledOutput",
    "Telemetry",
    "emission_context",
    "human_actor",
    "load_settings",
    "new_actor",
    "new_resource",
    "parse_event",
    "producer_from_settings",
    "synthetic_actor",
    "system_actor",
]
