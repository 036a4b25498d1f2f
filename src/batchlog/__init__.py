"""
Public entrypoints for batchlog.

Provides ``get_logger()`` which wires a ``ComponentLogger`` to a settings
provider and a persistence sink chosen from ``Settings``.
"""

from __future__ import annotations

from typing import Any

from ._version import __version__
from .core.entry import LogEntryBuilder, new_log_entry
from .core.errors import (
    BatchlogError,
    ConfigurationError,
    SaveError,
    SettingsFetchError,
    SettingsUnavailableError,
)
from .core.levels import LoggingLevel
from .core.logger import ComponentLogger
from .core.providers import (
    HttpSettingsProvider,
    SettingsProvider,
    StaticSettingsProvider,
)
from .core.settings import (
    ClearPolicy,
    ComponentLoggerSettings,
    SaveMethod,
    Settings,
)
from .metrics.metrics import MetricsCollector
from .plugins.sinks import (
    HttpPersistenceSink,
    InMemorySink,
    PersistenceSink,
    StdoutJsonSink,
)

__all__ = [
    "BatchlogError",
    "ClearPolicy",
    "ComponentLogger",
    "ComponentLoggerSettings",
    "ConfigurationError",
    "HttpPersistenceSink",
    "HttpSettingsProvider",
    "InMemorySink",
    "LogEntryBuilder",
    "LoggingLevel",
    "PersistenceSink",
    "SaveError",
    "SaveMethod",
    "Settings",
    "SettingsFetchError",
    "SettingsProvider",
    "SettingsUnavailableError",
    "StaticSettingsProvider",
    "StdoutJsonSink",
    "VERSION",
    "__version__",
    "get_logger",
    "new_log_entry",
]

VERSION = __version__


def get_logger(
    settings: Settings | None = None,
    *,
    settings_provider: SettingsProvider | None = None,
    sink: Any | None = None,
) -> ComponentLogger:
    """Return a component logger wired from library settings.

    Provider selection: an explicit ``settings_provider`` wins; otherwise an
    ``HttpSettingsProvider`` when ``http.settings_endpoint`` is set, else a
    ``StaticSettingsProvider`` serving ``Settings.defaults``.

    Sink selection: an explicit ``sink`` wins; otherwise an
    ``HttpPersistenceSink`` when ``http.save_endpoint`` is set, else a
    ``StdoutJsonSink``.

    Example:
        >>> logger = get_logger()
        >>> await logger.ready()
        >>> logger.info("Application started")
        >>> logger.save_log()
    """
    cfg = settings or Settings()

    if settings_provider is None:
        if cfg.http.settings_endpoint:
            settings_provider = HttpSettingsProvider(
                cfg.http.settings_endpoint,
                headers=cfg.http.headers,
                timeout_seconds=cfg.http.timeout_seconds,
            )
        else:
            settings_provider = StaticSettingsProvider(cfg.defaults)

    if sink is None:
        if cfg.http.save_endpoint:
            sink = HttpPersistenceSink(
                endpoint=cfg.http.save_endpoint,
                headers=cfg.http.headers,
                timeout_seconds=cfg.http.timeout_seconds,
            )
        else:
            sink = StdoutJsonSink()

    return ComponentLogger(
        settings_provider,
        sink,
        clear_policy=cfg.core.clear_buffer_on,
        metrics=MetricsCollector(enabled=cfg.core.enable_metrics),
    )
