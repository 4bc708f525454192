"""Span/metric naming and attribute derivation for lifecycle events."""

from __future__ import annotations

from packages.lifecycle.events import LifecycleEvent

COUNTER_SUFFIX = ".count"
HISTOGRAM_SUFFIX = ".duration"

ATTR_EVENT_TYPE = "event.type"
ATTR_SERVICE_NAME = "service.name"
ATTR_SERVICE_INSTANCE_ID = "service.instance.id"
ATTR_CORRELATION_ID = "correlation.id"
ATTR_API_NAME = "api.name"


def counter_name(event_type: str) -> str:
    return f"{event_type}{COUNTER_SUFFIX}"


def histogram_name(event_type: str) -> str:
    return f"{event_type}{HISTOGRAM_SUFFIX}"


def event_attributes(event: LifecycleEvent) -> dict[str, str]:
    """Return span and metric attributes for one event.

    ``correlation.id`` and ``api.name`` are only present when set.
    """
    attributes = {
        ATTR_EVENT_TYPE: event.event_type,
        ATTR_SERVICE_NAME: event.service,
        ATTR_SERVICE_INSTANCE_ID: event.host,
    }
    if event.correlation_id:
        attributes[ATTR_CORRELATION_ID] = event.correlation_id
    if event.api:
        attributes[ATTR_API_NAME] = event.api
    return attributes
