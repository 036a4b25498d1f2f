"""
Error taxonomy for batchlog.

Every error raised by the library derives from ``BatchlogError`` and carries
an ``ErrorCategory`` plus the optional underlying ``cause``. None of these
errors are fatal to a host application: the engine contains them and
degrades to "entry dropped" or "batch unsaved".
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Broad error buckets used in diagnostics payloads."""

    CONFIGURATION = "configuration"
    SETTINGS = "settings"
    PERSISTENCE = "persistence"
    SERIALIZATION = "serialization"


class BatchlogError(Exception):
    """Base class for all batchlog errors."""

    category: ErrorCategory = ErrorCategory.CONFIGURATION

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        cause: BaseException | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category
        self.cause = cause
        self.context: dict[str, Any] = dict(context)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "error_type": type(self).__name__,
            "category": self.category.value,
            "message": self.message,
        }
        if self.cause is not None:
            data["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        if self.context:
            data["context"] = dict(self.context)
        return data


class ConfigurationError(BatchlogError):
    """Invalid library configuration."""

    category = ErrorCategory.CONFIGURATION


class SettingsUnavailableError(BatchlogError):
    """A gate check ran before a settings snapshot was available."""

    category = ErrorCategory.SETTINGS


class SettingsFetchError(BatchlogError):
    """The settings provider could not supply a valid snapshot."""

    category = ErrorCategory.SETTINGS


class SaveError(BatchlogError):
    """The persistence sink rejected or failed to store a batch."""

    category = ErrorCategory.PERSISTENCE


class SerializationError(BatchlogError):
    """An entry or batch could not be serialized."""

    category = ErrorCategory.SERIALIZATION
