"""Public color registry API."""

from .loader import (
    ColorDefinitions,
    apply_color_definitions,
    extract_color,
    load_color_definitions,
    registry_from_definitions,
)
from .registry import DEFAULT_STATUS_COLORS, GRAY, ColorRegistry
from .styles import format_with_color, style_for

__all__ = [
    "DEFAULT_STATUS_COLORS",
    "GRAY",
    "ColorDefinitions",
    "ColorRegistry",
    "apply_color_definitions",
    "extract_color",
    "format_with_color",
    "load_color_definitions",
    "registry_from_definitions",
    "style_for",
]
