"""Tests for pydantic-settings-backed configuration and producer wiring."""

from __future__ import annotations

import io
import json
import os
import socket
from pathlib import Path

import pytest

from packages.lifecycle.config import (
    ColorSettings,
    TelemetrySettings,
    load_settings,
    producer_from_settings,
    registry_from_settings,
    telemetry_from_settings,
)
from packages.lifecycle.events import new_resource
from packages.lifecycle.telemetry import NoopTelemetry, OtelTelemetry


@pytest.fixture(autouse=True)
def _clean_lifecycle_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ambient ``LIFECYCLE_`` variables so tests see only their own."""
    for key in list(os.environ):
        if key.startswith("LIFECYCLE_"):
            monkeypatch.delenv(key)


def test_load_settings_uses_precedence_cascade(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Init params override env, env overrides YAML, then defaults."""
    config_file = tmp_path / "lifecycle.yaml"
    config_file.write_text(
        "\n".join(
            [
                "logging:",
                "  level: WARNING",
                "producer:",
                "  service: from-yaml",
                "  api: orders.v1",
                "output:",
                "  mode: styled",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("LIFECYCLE_LOGGING__LEVEL", "ERROR")
    monkeypatch.setenv("LIFECYCLE_PRODUCER__SERVICE", "from-env")

    settings = load_settings(
        cli_params={"logging": {"level": "DEBUG"}}, config_path=config_file
    )

    assert settings.logging.level == "DEBUG"
    assert settings.producer.service == "from-env"
    assert settings.producer.api == "orders.v1"
    assert settings.output.mode == "styled"
    assert settings.telemetry.tracer_name == "lifecycle"


def test_load_settings_uses_model_defaults_when_sources_missing(
    tmp_path: Path,
) -> None:
    """Settings fall back to model defaults when env and YAML are absent."""
    settings = load_settings(config_path=tmp_path / "missing.yaml")

    assert settings.logging.level == "INFO"
    assert settings.producer.service == ""
    assert settings.producer.host == socket.gethostname()
    assert settings.redaction.marker == "[REDACTED]"
    assert settings.output.mode == "json"
    assert settings.telemetry.enabled is True
    assert settings.colors.statuses == {}


def test_producer_from_settings_json_mode(tmp_path: Path) -> None:
    """JSON mode writes records with the configured identity and marker."""
    settings = load_settings(
        cli_params={
            "producer": {"service": "orders", "host": "host-1"},
            "redaction": {"marker": "***"},
        },
        config_path=tmp_path / "missing.yaml",
    )
    output = io.StringIO()

    producer = producer_from_settings(
        settings, output=output, telemetry=NoopTelemetry()
    )
    producer.emit_resource_created(
        "req-1",
        actor=None,
        resource=new_resource("User", "usr-1"),
        resource_data={"email": "alice@example.com"},
    )

    record = json.loads(output.getvalue())
    assert record["service"] == "orders"
    assert record["host"] == "host-1"
    assert record["resource_data"] == {"email": "***"}


def test_producer_from_settings_styled_mode_registers_colors(
    tmp_path: Path,
) -> None:
    """Styled mode renders lines and applies configured colors."""
    settings = load_settings(
        cli_params={
            "producer": {"service": "orders"},
            "output": {"mode": "styled"},
            "colors": {
                "statuses": {"created": "#ABCDEF"},
                "apis": {"User": "#123456"},
            },
        },
        config_path=tmp_path / "missing.yaml",
    )
    terminal = io.StringIO()

    producer = producer_from_settings(
        settings, output=terminal, telemetry=NoopTelemetry()
    )
    producer.emit_service_started("1.0.0", 7)

    assert producer.color_registry.status_color("created") == "#ABCDEF"
    assert producer.color_registry.api_color("User") == "#123456"
    assert "service.started" in terminal.getvalue()
    assert not terminal.getvalue().lstrip().startswith("{")


def test_producer_from_settings_requires_service(tmp_path: Path) -> None:
    """An unset service name is a configuration error."""
    settings = load_settings(config_path=tmp_path / "missing.yaml")

    with pytest.raises(ValueError):
        producer_from_settings(settings, telemetry=NoopTelemetry())


def test_registry_from_settings_seeds_all_maps() -> None:
    """Every colors subtree lands in its registry."""
    registry = registry_from_settings(
        ColorSettings(
            services={"orders": "#111111"},
            apis={"Order": "#222222"},
            events={"resource.created": "#333333"},
            statuses={"pending": "#444444"},
        )
    )

    assert registry.service_color("orders") == "#111111"
    assert registry.api_color("Order") == "#222222"
    assert registry.event_color("resource.created") == "#333333"
    assert registry.status_color("pending") == "#444444"


def test_telemetry_from_settings_honors_enabled_flag() -> None:
    """Disabled telemetry yields the no-op collaborator."""
    assert isinstance(
        telemetry_from_settings(TelemetrySettings(enabled=False)), NoopTelemetry
    )
    assert isinstance(telemetry_from_settings(TelemetrySettings()), OtelTelemetry)

