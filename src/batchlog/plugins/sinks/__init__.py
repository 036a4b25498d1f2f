from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from .http_client import HttpPersistenceSink, HttpSinkConfig
from .memory import InMemorySink
from .stdout_json import StdoutJsonSink


@runtime_checkable
class PersistenceSink(Protocol):
    """Base async persistence interface.

    Sinks store a whole batch of entries in one call. ``save_method_name`` is
    an opaque strategy token (e.g. ``"QUEUEABLE"``) or None, in which case
    the backend applies its own default. Sinks may raise; the logger contains
    every failure.
    """

    async def save(
        self,
        entries: Sequence[Any],
        save_method_name: str | None,
    ) -> None:  # noqa: D401
        """Persist ``entries`` in order."""
        ...


__all__ = [
    "HttpPersistenceSink",
    "HttpSinkConfig",
    "InMemorySink",
    "PersistenceSink",
    "StdoutJsonSink",
]
