"""Public API for lifecycle producer configuration."""

from .loader import (
    load_settings,
    producer_from_settings,
    registry_from_settings,
    telemetry_from_settings,
)
from .models import (
    DEFAULT_CONFIG_PATH,
    ColorSettings,
    LifecycleSettings,
    LoggingSettings,
    OutputSettings,
    ProducerSettings,
    RedactionSettings,
    TelemetrySettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ColorSettings",
    "LifecycleSettings",
    "LoggingSettings",
    "OutputSettings",
    "ProducerSettings",
    "RedactionSettings",
    "TelemetrySettings",
    "load_settings",
    "producer_from_settings",
    "registry_from_settings",
    "telemetry_from_settings",
]
