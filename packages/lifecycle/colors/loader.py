"""Populate a ``ColorRegistry`` from annotation-derived color definitions.

Type definitions are supplied already parsed: mappings with a ``kind``
(``"Type"`` for APIs, ``"Event"`` for events), a ``type`` name and an
``annotations`` list. Annotation colors may be a bare ``"#RRGGBB"`` string or
a mapping carrying the color under ``value`` or ``color``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .registry import ColorRegistry

_API_KINDS = frozenset({"type", "api"})
_EVENT_KINDS = frozenset({"event"})


@dataclass
class ColorDefinitions:
    """Color maps gathered from type/event annotations or configuration."""

    apis: dict[str, str] = field(default_factory=dict)
    events: dict[str, str] = field(default_factory=dict)
    services: dict[str, str] = field(default_factory=dict)
    statuses: dict[str, str] = field(default_factory=dict)


def extract_color(annotations: Any) -> str:
    """Return the first color found in one annotation or a list of them."""
    if isinstance(annotations, str):
        return annotations.strip()
    if isinstance(annotations, Mapping):
        for key in ("value", "color"):
            candidate = annotations.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        nested = annotations.get("color")
        if isinstance(nested, Mapping):
            return extract_color(nested)
        return ""
    if isinstance(annotations, (list, tuple)):
        for annotation in annotations:
            color = extract_color(annotation)
            if color:
                return color
    return ""


def load_color_definitions(
    type_definitions: Iterable[Mapping[str, Any]],
) -> ColorDefinitions:
    """Collect API and event colors from parsed type definitions.

    Definitions without a recognizable kind, a type name, or a color
    annotation are skipped.
    """
    definitions = ColorDefinitions()
    for definition in type_definitions:
        kind = str(definition.get("kind", "")).lower()
        type_name = definition.get("type")
        if not isinstance(type_name, str) or not type_name:
            continue
        color = extract_color(definition.get("annotations"))
        if not color:
            continue
        if kind in _API_KINDS:
            definitions.apis[type_name] = color
        elif kind in _EVENT_KINDS:
            definitions.events[type_name] = color
    return definitions


def apply_color_definitions(
    registry: ColorRegistry, definitions: ColorDefinitions
) -> ColorRegistry:
    """Register every definition on ``registry`` and return it."""
    for service, color in definitions.services.items():
        registry.register_service_color(service, color)
    for api, color in definitions.apis.items():
        registry.register_api_color(api, color)
    for event_type, color in definitions.events.items():
        registry.register_event_color(event_type, color)
    for status, color in definitions.statuses.items():
        registry.register_status_color(status, color)
    return registry


def registry_from_definitions(definitions: ColorDefinitions) -> ColorRegistry:
    """Build a fresh registry seeded with ``definitions``."""
    return apply_color_definitions(ColorRegistry(), definitions)
