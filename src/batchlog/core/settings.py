"""
Configuration models for batchlog using Pydantic v2.

Two kinds of configuration live here:

- ``ComponentLoggerSettings``: the per-user snapshot a ``SettingsProvider``
  returns. It is validated at the provider boundary and frozen afterwards,
  so the engine never reads ad hoc fields off an untyped payload. Wire
  payloads use camelCase names (``isEnabled``, ``userLoggingLevel``...);
  snake_case names are accepted too.
- ``Settings``: library configuration read from the environment with the
  ``BATCHLOG_`` prefix and ``__`` as nested delimiter, e.g.
  ``BATCHLOG_CORE__CLEAR_BUFFER_ON=on_success``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)

from .levels import DEFAULT_LEVEL_ORDINALS, get_level_ordinal, normalize_level


class ClearPolicy(str, Enum):
    """When ``save_log`` empties the buffer."""

    ON_INITIATE = "on_initiate"  # at-most-once, cleared before the sink answers
    ON_SUCCESS = "on_success"  # cleared only after the sink confirms


class SaveMethod(str, Enum):
    """Well-known save strategy tokens understood by persistence backends."""

    EVENT_BUS = "EVENT_BUS"
    QUEUEABLE = "QUEUEABLE"
    REST = "REST"
    SYNCHRONOUS_DML = "SYNCHRONOUS_DML"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class LoggingLevelSetting(_WireModel):
    """The user's configured threshold level."""

    name: str
    ordinal: int

    @field_validator("name")
    @classmethod
    def _upper_name(cls, value: str) -> str:
        return normalize_level(value)


class ComponentLoggerSettings(_WireModel):
    """Settings snapshot for the current user, fetched once per logger."""

    is_enabled: bool = Field(default=False, description="Master logging switch")
    user_logging_level: LoggingLevelSetting = Field(
        default_factory=lambda: LoggingLevelSetting(
            name="INFO", ordinal=DEFAULT_LEVEL_ORDINALS["INFO"]
        ),
        description="Threshold level; entries below it are not buffered",
    )
    supported_logging_levels: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_LEVEL_ORDINALS),
        description="Mapping of level name to ordinal",
    )
    is_console_logging_enabled: bool = Field(
        default=False,
        description="Echo entries and save failures to the console channel",
    )
    default_save_method_name: str | None = Field(
        default=None,
        description="Save method used when save_log() is called without one",
    )

    @model_validator(mode="before")
    @classmethod
    def _resolve_level_name(cls, data: Any) -> Any:
        # A bare level name ("DEBUG") is resolved against the supported levels
        if not isinstance(data, dict):
            return data
        key = "userLoggingLevel" if "userLoggingLevel" in data else "user_logging_level"
        level = data.get(key)
        if isinstance(level, str):
            supported = data.get(
                "supportedLoggingLevels", data.get("supported_logging_levels")
            )
            if supported is not None:
                supported = {normalize_level(k): int(v) for k, v in supported.items()}
            ordinal = get_level_ordinal(level, supported)
            if ordinal is None:
                raise ValueError(f"unknown user logging level: {level!r}")
            data = dict(data)
            data[key] = {"name": level, "ordinal": ordinal}
        return data

    @field_validator("supported_logging_levels")
    @classmethod
    def _upper_level_names(cls, value: dict[str, int]) -> dict[str, int]:
        return {normalize_level(k): int(v) for k, v in value.items()}

    @field_validator("default_save_method_name")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class CoreSettings(BaseModel):
    """Engine behavior and internal diagnostics."""

    internal_logging_enabled: bool = Field(
        default=False, description="Emit DEBUG/WARN diagnostics for internal errors"
    )
    clear_buffer_on: ClearPolicy = Field(
        default=ClearPolicy.ON_INITIATE,
        description="Clear the buffer when a save starts or when it succeeds",
    )
    enable_metrics: bool = Field(
        default=False, description="Enable Prometheus-compatible metrics"
    )


class HttpSettings(BaseModel):
    """Endpoints used by the HTTP settings provider and persistence sink."""

    settings_endpoint: str | None = Field(
        default=None, description="GET endpoint returning a settings snapshot"
    )
    save_endpoint: str | None = Field(
        default=None, description="POST endpoint receiving entry batches"
    )
    headers: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class Settings(BaseSettings):
    """Top-level library configuration."""

    core: CoreSettings = Field(default_factory=CoreSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    # Snapshot served by the static provider when no settings endpoint is set
    defaults: ComponentLoggerSettings = Field(
        default_factory=lambda: ComponentLoggerSettings(is_enabled=True)
    )

    model_config = SettingsConfigDict(
        env_prefix="BATCHLOG_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )
