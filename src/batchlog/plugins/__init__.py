"""
Pluggable persistence sinks for batchlog.

Sinks implement ``async save(entries, save_method_name)``; see
``batchlog.plugins.sinks.PersistenceSink``.
"""

from .sinks import (
    HttpPersistenceSink,
    HttpSinkConfig,
    InMemorySink,
    PersistenceSink,
    StdoutJsonSink,
)

__all__ = [
    "HttpPersistenceSink",
    "HttpSinkConfig",
    "InMemorySink",
    "PersistenceSink",
    "StdoutJsonSink",
]
