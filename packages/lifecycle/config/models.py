"""Typed configuration models for the lifecycle producer."""

from __future__ import annotations

import socket
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from packages.lifecycle.redaction import DEFAULT_REDACTION_MARKER

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "lifecycle" / "lifecycle.yaml"


class LoggingSettings(BaseModel):
    """Diagnostic logging for the embedding process."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "lifecycle"
    environment: str = "dev"


class ProducerSettings(BaseModel):
    """Identity stamped onto every emitted event."""

    service: str = ""
    host: str = Field(default_factory=socket.gethostname)
    api: str = ""


class RedactionSettings(BaseModel):
    marker: str = DEFAULT_REDACTION_MARKER


class OutputSettings(BaseModel):
    """Sink selection.

    ``json`` writes records to stdout. ``styled`` renders lines to stdout and,
    with ``json_to_stderr``, writes the records to stderr as well.
    """

    mode: Literal["json", "styled"] = "json"
    json_only: bool = False
    json_to_stderr: bool = False


class TelemetrySettings(BaseModel):
    enabled: bool = True
    tracer_name: str = "lifecycle"
    meter_name: str = "lifecycle"


class ColorSettings(BaseModel):
    """Color registrations applied at producer construction."""

    services: dict[str, str] = Field(default_factory=dict)
    apis: dict[str, str] = Field(default_factory=dict)
    events: dict[str, str] = Field(default_factory=dict)
    statuses: dict[str, str] = Field(default_factory=dict)


class LifecycleSettings(BaseSettings):
    """Root settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="LIFECYCLE_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    producer: ProducerSettings = Field(default_factory=ProducerSettings)
    redaction: RedactionSettings = Field(default_factory=RedactionSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
    colors: ColorSettings = Field(default_factory=ColorSettings)

    _config_path: ClassVar[Path] = DEFAULT_CONFIG_PATH

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Apply precedence: init > env > yaml > defaults."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(
                settings_cls,
                yaml_file=cls._config_path,
                yaml_file_encoding="utf-8",
            ),
        )
