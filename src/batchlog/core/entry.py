"""
Log entry builder and the default entry factory.

A ``LogEntryBuilder`` is handed back to callers by every leveled logger
method so they can keep attaching data after creation::

    logger.error("Order sync failed").set_record_id("a01").add_tag("sync")

Mutations after the entry is buffered are visible in the persisted batch,
since the buffer holds the builder itself.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from . import diagnostics
from .levels import LoggingLevel, normalize_level


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LogEntryBuilder:
    """Mutable log entry with chainable setters."""

    logging_level: str
    should_save: bool = False
    is_console_logging_enabled: bool = False
    message: str = ""
    scenario: str | None = None
    record_id: str | None = None
    record: dict[str, Any] | None = None
    error: dict[str, Any] | None = None
    tags: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        self.logging_level = normalize_level(self.logging_level)
        if self.logging_level not in LoggingLevel.__members__:
            raise ValueError(f"Unsupported logging level: {self.logging_level}")

    def set_message(self, message: Any) -> LogEntryBuilder:
        """Set the entry message; echoes to the console when enabled."""
        self.message = "" if message is None else str(message)
        if self.is_console_logging_enabled:
            diagnostics.console(
                self.logging_level,
                self.message,
                scenario=self.scenario,
                timestamp=self.timestamp.isoformat(),
            )
        return self

    def set_record_id(self, record_id: str | None) -> LogEntryBuilder:
        self.record_id = record_id
        return self

    def set_record(self, record: Mapping[str, Any] | None) -> LogEntryBuilder:
        """Attach a related record; its ``id``/``Id`` becomes the record id."""
        if record is None:
            self.record = None
            return self
        self.record = dict(record)
        rid = self.record.get("id", self.record.get("Id"))
        if rid is not None:
            self.record_id = str(rid)
        return self

    def set_error(self, exc: BaseException | None) -> LogEntryBuilder:
        """Capture an exception's type, message and formatted stack."""
        if exc is None:
            self.error = None
            return self
        self.error = {
            "type": type(exc).__name__,
            "message": str(exc),
            "stackTrace": "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            ),
        }
        return self

    def add_tag(self, tag: str) -> LogEntryBuilder:
        tag = tag.strip()
        if tag and tag not in self.tags:
            self.tags.append(tag)
        return self

    def add_tags(self, tags: Iterable[str]) -> LogEntryBuilder:
        for tag in tags:
            self.add_tag(tag)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Wire representation with camelCase keys; unset optionals omitted."""
        data: dict[str, Any] = {
            "loggingLevel": self.logging_level,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.scenario is not None:
            data["scenario"] = self.scenario
        if self.record_id is not None:
            data["recordId"] = self.record_id
        if self.record is not None:
            data["record"] = self.record
        if self.error is not None:
            data["error"] = self.error
        if self.tags:
            data["tags"] = list(self.tags)
        return data


EntryFactory = Callable[[str, bool, bool], LogEntryBuilder]


def new_log_entry(
    logging_level: LoggingLevel | str,
    should_save: bool,
    is_console_logging_enabled: bool,
) -> LogEntryBuilder:
    """Default entry factory used by ``ComponentLogger``."""
    return LogEntryBuilder(
        logging_level=normalize_level(logging_level),
        should_save=bool(should_save),
        is_console_logging_enabled=bool(is_console_logging_enabled),
    )
