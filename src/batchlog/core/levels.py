"""Logging level registry for component loggers.

Seven named levels are supported, from most to least severe:
ERROR, WARN, INFO, DEBUG, FINE, FINER, FINEST.

The ordinal assigned to each level is owned by the settings snapshot
(``supported_logging_levels``), not by this module. The defaults below
follow the platform convention where verbosity grows as the ordinal
shrinks, so a user threshold of ``INFO`` admits INFO, WARN and ERROR:

    threshold.ordinal <= entry_ordinal  ->  entry is eligible

Example:
    >>> meets_threshold("WARN", DEFAULT_LEVEL_ORDINALS["INFO"])
    True
    >>> meets_threshold("DEBUG", DEFAULT_LEVEL_ORDINALS["INFO"])
    False
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Mapping


class LoggingLevel(str, Enum):
    """Named severities accepted by the leveled logger methods."""

    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"
    FINE = "FINE"
    FINER = "FINER"
    FINEST = "FINEST"


# NONE (0) and INTERNAL (1) are reserved and never used for entries
DEFAULT_LEVEL_ORDINALS: Final[dict[str, int]] = {
    "FINEST": 2,
    "FINER": 3,
    "FINE": 4,
    "DEBUG": 5,
    "INFO": 6,
    "WARN": 7,
    "ERROR": 8,
}


def normalize_level(level: LoggingLevel | str) -> str:
    """Return the canonical upper-case name for a level or level name."""
    if isinstance(level, LoggingLevel):
        return level.value
    return str(level).strip().upper()


def get_level_ordinal(
    level: LoggingLevel | str,
    supported_levels: Mapping[str, int] | None = None,
) -> int | None:
    """Look up the ordinal for ``level``.

    Args:
        level: Level enum member or name (case-insensitive)
        supported_levels: Mapping of level name to ordinal. Defaults to
            ``DEFAULT_LEVEL_ORDINALS``.

    Returns:
        The ordinal, or None when the level is not in the mapping.
    """
    levels = DEFAULT_LEVEL_ORDINALS if supported_levels is None else supported_levels
    name = normalize_level(level)
    ordinal = levels.get(name)
    if ordinal is None:
        return None
    return int(ordinal)


def meets_threshold(
    level: LoggingLevel | str,
    threshold_ordinal: int,
    supported_levels: Mapping[str, int] | None = None,
) -> bool:
    """Inclusive threshold comparison; unknown levels never meet it."""
    ordinal = get_level_ordinal(level, supported_levels)
    if ordinal is None:
        return False
    return threshold_ordinal <= ordinal


def get_all_levels() -> list[LoggingLevel]:
    """Return every level, most severe first."""
    return list(LoggingLevel)
