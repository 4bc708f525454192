"""Settings loading and producer construction from settings.

The cascade is always:
1) CLI/init params
2) Environment variables (``LIFECYCLE_`` prefix, ``__`` nesting)
3) ``~/.config/lifecycle/lifecycle.yaml`` or an explicit path
4) Built-in defaults

Example: ``LIFECYCLE_OUTPUT__MODE=styled`` -> ``output.mode = "styled"``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, ClassVar, Mapping, TextIO

from packages.lifecycle.colors import (
    ColorDefinitions,
    ColorRegistry,
    registry_from_definitions,
)
from packages.lifecycle.output import StyledOutput
from packages.lifecycle.producer import Producer
from packages.lifecycle.redaction import Redactor
from packages.lifecycle.telemetry import NoopTelemetry, OtelTelemetry, Telemetry

from .models import ColorSettings, LifecycleSettings, TelemetrySettings


def load_settings(
    *,
    cli_params: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
) -> LifecycleSettings:
    """Resolve settings through the standard precedence cascade."""
    settings_cls: type[LifecycleSettings] = LifecycleSettings
    if config_path is not None:
        resolved_path = Path(config_path)

        class _PathSettings(LifecycleSettings):
            _config_path: ClassVar[Path] = resolved_path

        settings_cls = _PathSettings
    return settings_cls(**dict(cli_params or {}))


def registry_from_settings(colors: ColorSettings) -> ColorRegistry:
    """Build a color registry seeded from the ``colors`` subtree."""
    return registry_from_definitions(
        ColorDefinitions(
            apis=dict(colors.apis),
            events=dict(colors.events),
            services=dict(colors.services),
            statuses=dict(colors.statuses),
        )
    )


def telemetry_from_settings(telemetry: TelemetrySettings) -> Telemetry:
    if not telemetry.enabled:
        return NoopTelemetry()
    return OtelTelemetry(
        tracer_name=telemetry.tracer_name, meter_name=telemetry.meter_name
    )


def producer_from_settings(
    settings: LifecycleSettings,
    *,
    output: TextIO | None = None,
    telemetry: Telemetry | None = None,
) -> Producer:
    """Build a ``Producer`` wired from ``settings``.

    ``output`` replaces stdout as the primary writer in either mode.
    Raises ``ValueError`` when ``producer.service`` is empty.
    """
    colors = registry_from_settings(settings.colors)
    primary = output if output is not None else sys.stdout
    styled = None
    if settings.output.mode == "styled":
        styled = StyledOutput(
            primary,
            json_output=sys.stderr if settings.output.json_to_stderr else None,
            json_only=settings.output.json_only,
            color_registry=colors,
        )
    return Producer(
        settings.producer.service,
        settings.producer.host,
        api=settings.producer.api,
        output=primary,
        styled=styled,
        color_registry=colors,
        redactor=Redactor(marker=settings.redaction.marker),
        telemetry=telemetry or telemetry_from_settings(settings.telemetry),
    )
