"""
Buffering and persistence metrics for component loggers.

Implements minimal Prometheus-compatible counters for the buffer lifecycle:
entries buffered, entries filtered by the level gate, entries discarded by
``flush_buffer``, batches saved and save failures.

Design goals:
- Zero global state; each collector owns an isolated registry
- Safe no-op exporters when metrics are disabled, while still tracking
  in-memory counters for tests
- Callable from synchronous logger methods (thread lock, not asyncio)
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram


@dataclass
class BufferMetrics:
    """Captured runtime metrics for quick assertions in tests."""

    entries_buffered: int = 0
    entries_filtered: int = 0
    entries_discarded: int = 0
    batches_saved: int = 0
    entries_saved: int = 0
    save_failures: int = 0


class MetricsCollector:
    """Logger-scoped metrics collector."""

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = bool(enabled)
        self._lock = threading.Lock()
        self._state = BufferMetrics()

        self._c_buffered: Any | None = None
        self._c_filtered: Any | None = None
        self._c_discarded: Any | None = None
        self._c_saved: Any | None = None
        self._c_failures: Any | None = None
        self._h_batch_size: Any | None = None
        self._registry: CollectorRegistry | None = None

        if self._enabled:
            # Isolated registry avoids duplicate registration across loggers
            self._registry = CollectorRegistry()
            self._c_buffered = Counter(
                "batchlog_entries_buffered_total",
                "Entries that passed the level gate and were buffered",
                ["level"],
                registry=self._registry,
            )
            self._c_filtered = Counter(
                "batchlog_entries_filtered_total",
                "Entries created but rejected by the level gate",
                ["level"],
                registry=self._registry,
            )
            self._c_discarded = Counter(
                "batchlog_entries_discarded_total",
                "Buffered entries discarded without a save",
                registry=self._registry,
            )
            self._c_saved = Counter(
                "batchlog_batches_saved_total",
                "Batches accepted by the persistence sink",
                registry=self._registry,
            )
            self._c_failures = Counter(
                "batchlog_save_failures_total",
                "Batches the persistence sink failed to store",
                registry=self._registry,
            )
            self._h_batch_size = Histogram(
                "batchlog_batch_size",
                "Number of entries per saved batch",
                buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000),
                registry=self._registry,
            )

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def registry(self) -> CollectorRegistry | None:
        """Expose the isolated Prometheus registry when enabled."""
        return self._registry

    def record_entry_buffered(self, level: str) -> None:
        with self._lock:
            self._state.entries_buffered += 1
        if self._c_buffered is not None:
            self._c_buffered.labels(level=level).inc()

    def record_entry_filtered(self, level: str) -> None:
        with self._lock:
            self._state.entries_filtered += 1
        if self._c_filtered is not None:
            self._c_filtered.labels(level=level).inc()

    def record_entries_discarded(self, count: int) -> None:
        if count <= 0:
            return
        with self._lock:
            self._state.entries_discarded += count
        if self._c_discarded is not None:
            self._c_discarded.inc(count)

    def record_batch_saved(self, size: int) -> None:
        with self._lock:
            self._state.batches_saved += 1
            self._state.entries_saved += size
        if self._c_saved is not None:
            self._c_saved.inc()
        if self._h_batch_size is not None:
            self._h_batch_size.observe(size)

    def record_save_failure(self) -> None:
        with self._lock:
            self._state.save_failures += 1
        if self._c_failures is not None:
            self._c_failures.inc()

    def snapshot(self) -> BufferMetrics:
        # Copy without exposing internals
        with self._lock:
            return BufferMetrics(**vars(self._state))
