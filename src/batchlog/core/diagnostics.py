"""
Internal diagnostics for non-fatal errors inside batchlog.

Diagnostics are structured dict payloads written as JSON lines to stderr by
default. ``warn`` and ``debug`` are emitted only when
``Settings.core.internal_logging_enabled`` is true (read once and cached);
``error`` is always emitted. ``console`` is the echo channel used when a
settings snapshot enables console logging, and is not gated here since the
caller already checked the snapshot.

Diagnostics never raise: a failing writer is ignored.
"""

from __future__ import annotations

import json
import sys
import time
from typing import Any, Callable

DiagnosticWriter = Callable[[dict[str, Any]], None]

# Cached value of Settings.core.internal_logging_enabled; None means unread
_internal_logging_enabled: bool | None = None


def _default_writer(payload: dict[str, Any]) -> None:
    try:
        line = json.dumps(payload, separators=(",", ":"), default=str)
    except Exception:
        line = json.dumps({"message": str(payload)}, separators=(",", ":"))
    sys.stderr.write(line + "\n")


_writer: DiagnosticWriter = _default_writer


def set_writer_for_tests(writer: DiagnosticWriter) -> None:
    """Replace the diagnostics writer (tests capture payloads this way)."""
    global _writer
    _writer = writer


def _reset_for_tests() -> None:
    global _writer, _internal_logging_enabled
    _writer = _default_writer
    _internal_logging_enabled = None


def is_enabled() -> bool:
    """Return whether gated diagnostics are enabled, caching the lookup."""
    global _internal_logging_enabled
    if _internal_logging_enabled is None:
        try:
            from .settings import Settings

            _internal_logging_enabled = bool(Settings().core.internal_logging_enabled)
        except Exception:
            _internal_logging_enabled = False
    return _internal_logging_enabled


def _emit(level: str, component: str, message: str, fields: dict[str, Any]) -> None:
    payload: dict[str, Any] = {
        "ts": time.time(),
        "level": level,
        "component": component,
        "message": message,
    }
    payload.update(fields)
    try:
        _writer(payload)
    except Exception:
        pass


def debug(component: str, message: str, **fields: Any) -> None:
    if is_enabled():
        _emit("DEBUG", component, message, fields)


def warn(component: str, message: str, **fields: Any) -> None:
    if is_enabled():
        _emit("WARN", component, message, fields)


def error(component: str, message: str, **fields: Any) -> None:
    _emit("ERROR", component, message, fields)


def console(level: str, message: str, **fields: Any) -> None:
    """Echo a log entry to the console channel."""
    _emit(level, "console", message, fields)
