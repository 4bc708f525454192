"""Tests for color registries, annotation loading and rich styling."""

from __future__ import annotations

from packages.lifecycle.colors import (
    DEFAULT_STATUS_COLORS,
    GRAY,
    ColorDefinitions,
    ColorRegistry,
    apply_color_definitions,
    extract_color,
    format_with_color,
    load_color_definitions,
    style_for,
)


def test_unregistered_partial_lookups_are_empty() -> None:
    """Service, API and event lookups return empty when unregistered."""
    registry = ColorRegistry()

    assert registry.service_color("orders") == ""
    assert registry.api_color("Order") == ""
    assert registry.event_color("resource.created") == ""


def test_registration_is_exact_match() -> None:
    """Registered colors resolve only for their exact key."""
    registry = ColorRegistry()
    registry.register_service_color("orders", "#112233")
    registry.register_api_color("Order", "#445566")
    registry.register_event_color("resource.created", "#778899")

    assert registry.service_color("orders") == "#112233"
    assert registry.service_color("Orders") == ""
    assert registry.api_color("Order") == "#445566"
    assert registry.event_color("resource.created") == "#778899"
    assert registry.event_color("resource") == ""


def test_status_lookup_is_total() -> None:
    """Defaults are pre-seeded, overrides win, unknown statuses are gray."""
    registry = ColorRegistry()
    registry.register_status_color("created", "#ABCDEF")

    assert registry.status_color("error") == DEFAULT_STATUS_COLORS["error"]
    assert registry.status_color("created") == "#ABCDEF"
    assert registry.status_color("unknown") == GRAY == "#808080"


def test_http_status_color_follows_status_class() -> None:
    """HTTP codes map onto the status palette by hundreds class."""
    registry = ColorRegistry()

    assert registry.http_status_color(201) == registry.status_color("success")
    assert registry.http_status_color(304) == registry.status_color("info")
    assert registry.http_status_color(404) == registry.status_color("warning")
    assert registry.http_status_color(503) == registry.status_color("error")
    assert registry.http_status_color(99) == ""
    assert registry.http_status_color(600) == ""


def test_snapshot_is_a_copy() -> None:
    """Mutating a snapshot never changes the registry."""
    registry = ColorRegistry()
    registry.register_api_color("Order", "#445566")

    snapshot = registry.snapshot()
    snapshot["apis"]["Order"] = "#000000"

    assert registry.api_color("Order") == "#445566"
    assert snapshot["statuses"]["success"] == DEFAULT_STATUS_COLORS["success"]


def test_extract_color_accepts_annotation_shapes() -> None:
    """Colors can be bare strings, value/color mappings or lists of either."""
    assert extract_color(" #FF0000 ") == "#FF0000"
    assert extract_color({"value": "#00FF00"}) == "#00FF00"
    assert extract_color({"color": {"value": "#0000FF"}}) == "#0000FF"
    assert extract_color([{"other": 1}, {"color": "#123456"}]) == "#123456"
    assert extract_color({"other": "x"}) == ""
    assert extract_color(None) == ""


def test_load_color_definitions_sorts_by_kind() -> None:
    """Type definitions feed API colors; event definitions feed event colors."""
    definitions = load_color_definitions(
        [
            {"kind": "Type", "type": "Order", "annotations": ["#112233"]},
            {"kind": "Event", "type": "resource.created", "annotations": "#445566"},
            {"kind": "Enum", "type": "Plan", "annotations": "#778899"},
            {"kind": "Type", "type": "Invoice", "annotations": []},
            {"kind": "Type", "annotations": "#AABBCC"},
        ]
    )

    assert definitions.apis == {"Order": "#112233"}
    assert definitions.events == {"resource.created": "#445566"}


def test_apply_color_definitions_registers_every_map() -> None:
    """Applying definitions registers all four maps on the registry."""
    registry = apply_color_definitions(
        ColorRegistry(),
        ColorDefinitions(
            apis={"Order": "#112233"},
            events={"resource.created": "#445566"},
            services={"orders": "#778899"},
            statuses={"pending": "#AABBCC"},
        ),
    )

    assert registry.api_color("Order") == "#112233"
    assert registry.event_color("resource.created") == "#445566"
    assert registry.service_color("orders") == "#778899"
    assert registry.status_color("pending") == "#AABBCC"


def test_style_for_parses_hex_and_ignores_bad_colors() -> None:
    """Valid colors become foreground styles; empty or bad ones are unstyled."""
    assert style_for("#FF0000").color is not None
    assert style_for("#FF0000").color.triplet == (255, 0, 0)  # type: ignore[union-attr]
    assert style_for("").color is None
    assert style_for("not-a-color").color is None


def test_format_with_color_keeps_plain_text() -> None:
    """Styling never alters the rendered characters."""
    text = format_with_color("created", "#00BFFF")

    assert text.plain == "created"
    assert text.style.color.triplet == (0, 191, 255)  # type: ignore[union-attr]
