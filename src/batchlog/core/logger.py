"""
Buffered component logger.

``ComponentLogger`` collects log entries in memory for one execution
context and hands them to a persistence sink in a single batch:

    logger = ComponentLogger(provider, sink)
    await logger.ready()
    logger.info("Loaded account").set_record_id("001")
    logger.save_log("QUEUEABLE")

Entries are gated against the user's settings snapshot when they are
created, never at save time. The snapshot is fetched once per instance; until
it arrives, or if fetching fails, every entry is created but not buffered.
"""

from __future__ import annotations

import asyncio
import threading
import types
from typing import Any

from ..metrics.metrics import MetricsCollector
from . import diagnostics
from .entry import EntryFactory, LogEntryBuilder, new_log_entry
from .errors import SettingsUnavailableError
from .levels import LoggingLevel, meets_threshold, normalize_level
from .providers import SettingsProvider, parse_settings
from .settings import ClearPolicy, ComponentLoggerSettings, SaveMethod


class ComponentLogger:
    """Collects gated log entries and saves them as one batch."""

    def __init__(
        self,
        settings_provider: SettingsProvider,
        sink: Any,
        *,
        entry_factory: EntryFactory = new_log_entry,
        clear_policy: ClearPolicy | str = ClearPolicy.ON_INITIATE,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._provider = settings_provider
        self._sink = sink
        self._entry_factory = entry_factory
        self._clear_policy = ClearPolicy(clear_policy)
        self._metrics = metrics or MetricsCollector(enabled=False)

        self._settings: ComponentLoggerSettings | None = None
        self._scenario: str | None = None
        self._buffer: list[LogEntryBuilder] = []
        self._lock = threading.Lock()

        self._settings_task: asyncio.Task[ComponentLoggerSettings | None] | None
        self._settings_task = None
        self._settings_loaded = False
        # Keep references so in-flight saves are not garbage collected
        self._pending_saves: set[asyncio.Task[bool]] = set()
        # ids of buffered entries already handed to a pending on_success save
        self._in_flight: set[int] = set()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._settings_task = loop.create_task(self._load_settings())
        else:
            # Synchronous hosts get the snapshot before the first entry
            asyncio.run(self._load_settings())

    # Lifecycle

    async def _load_settings(self) -> ComponentLoggerSettings | None:
        try:
            snapshot = parse_settings(await self._provider.fetch())
        except Exception as exc:
            diagnostics.error(
                "component-logger",
                "failed to load settings",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return None
        finally:
            self._settings_loaded = True
        self._settings = snapshot
        return snapshot

    async def ready(self) -> ComponentLoggerSettings | None:
        """Wait for the settings fetch started at construction."""
        if self._settings_task is None and not self._settings_loaded:
            self._settings_task = asyncio.get_running_loop().create_task(
                self._load_settings()
            )
        if self._settings_task is not None:
            await self._settings_task
        return self._settings

    async def drain(self) -> None:
        """Wait for every in-flight save to finish."""
        while self._pending_saves:
            await asyncio.gather(*list(self._pending_saves), return_exceptions=True)

    async def __aenter__(self) -> ComponentLogger:
        await self.ready()
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc: BaseException | None,
        _tb: types.TracebackType | None,
    ) -> None:
        await self.drain()

    # Settings and scenario

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def clear_policy(self) -> ClearPolicy:
        return self._clear_policy

    def get_user_settings(self) -> ComponentLoggerSettings | None:
        """Return the current user's settings snapshot, or None."""
        return self._settings

    def get_scenario(self) -> str | None:
        return self._scenario

    def set_scenario(self, scenario: str | None) -> None:
        """Set the scenario for this transaction.

        The scenario is stamped onto every entry currently buffered and onto
        every entry created afterwards. Entries already saved keep theirs.
        """
        with self._lock:
            self._scenario = scenario
            for entry in self._buffer:
                entry.scenario = scenario

    # Leveled entry creation

    def error(self, message: Any) -> LogEntryBuilder:
        return self._new_entry(LoggingLevel.ERROR, message)

    def warn(self, message: Any) -> LogEntryBuilder:
        return self._new_entry(LoggingLevel.WARN, message)

    def info(self, message: Any) -> LogEntryBuilder:
        return self._new_entry(LoggingLevel.INFO, message)

    def debug(self, message: Any) -> LogEntryBuilder:
        return self._new_entry(LoggingLevel.DEBUG, message)

    def fine(self, message: Any) -> LogEntryBuilder:
        return self._new_entry(LoggingLevel.FINE, message)

    def finer(self, message: Any) -> LogEntryBuilder:
        return self._new_entry(LoggingLevel.FINER, message)

    def finest(self, message: Any) -> LogEntryBuilder:
        return self._new_entry(LoggingLevel.FINEST, message)

    # Buffer

    def get_buffer_size(self) -> int:
        """Number of entries generated but not yet saved."""
        return len(self._buffer)

    def get_buffer(self) -> list[LogEntryBuilder]:
        """Copy of the buffered entries, in insertion order."""
        with self._lock:
            return list(self._buffer)

    def flush_buffer(self) -> None:
        """Discard every buffered entry without saving."""
        with self._lock:
            discarded = len(self._buffer)
            self._buffer = []
        self._metrics.record_entries_discarded(discarded)

    def save_log(
        self, save_method_name: SaveMethod | str | None = None
    ) -> asyncio.Task[bool] | None:
        """Save buffered entries with ``save_method_name`` for this call only.

        Without a save method the snapshot's ``default_save_method_name`` is
        used; if that is unset too, the sink receives None and applies its
        own default.

        With ``ClearPolicy.ON_INITIATE`` the buffer is empty as soon as this
        returns, even if the sink later fails. With ``ON_SUCCESS`` the saved
        entries are removed only once the sink confirms, and entries already
        handed to a pending save are not sent again.

        Returns:
            The save task when an event loop is running, otherwise None
            (the save has then already completed). None as well when the
            buffer was empty and the sink was not called.
        """
        with self._lock:
            batch = [e for e in self._buffer if id(e) not in self._in_flight]
            if not batch:
                return None
            if self._clear_policy is ClearPolicy.ON_INITIATE:
                self._buffer = []
            else:
                self._in_flight.update(id(e) for e in batch)

        settings = self._settings
        if not save_method_name and settings is not None:
            save_method_name = settings.default_save_method_name
        if isinstance(save_method_name, SaveMethod):
            save_method_name = save_method_name.value
        method = save_method_name or None

        coro = self._persist(batch, method)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return None
        task = loop.create_task(coro)
        self._pending_saves.add(task)
        task.add_done_callback(self._pending_saves.discard)
        return task

    async def _persist(
        self, batch: list[LogEntryBuilder], save_method_name: str | None
    ) -> bool:
        sent = {id(entry) for entry in batch}
        try:
            await self._sink.save(batch, save_method_name)
        except Exception as exc:
            with self._lock:
                self._in_flight.difference_update(sent)
            self._metrics.record_save_failure()
            settings = self._settings
            if settings is not None and settings.is_console_logging_enabled:
                diagnostics.error(
                    "component-logger",
                    "failed to save log entries",
                    error_type=type(exc).__name__,
                    error=str(exc),
                    save_method_name=save_method_name,
                    entries=[entry.to_dict() for entry in batch],
                )
            else:
                diagnostics.warn(
                    "component-logger",
                    "failed to save log entries",
                    error_type=type(exc).__name__,
                    error=str(exc),
                    batch_size=len(batch),
                )
            return False

        if self._clear_policy is ClearPolicy.ON_SUCCESS:
            with self._lock:
                self._buffer = [e for e in self._buffer if id(e) not in sent]
                self._in_flight.difference_update(sent)
        self._metrics.record_batch_saved(len(batch))
        return True

    # Gating

    def _meets_user_logging_level(
        self,
        logging_level: LoggingLevel | str,
        settings: ComponentLoggerSettings | None,
    ) -> bool:
        """Inclusive threshold check of ``logging_level`` against ``settings``.

        Raises:
            SettingsUnavailableError: If no snapshot has been loaded
        """
        if settings is None:
            raise SettingsUnavailableError(
                "Settings snapshot not loaded", level=normalize_level(logging_level)
            )
        if settings.is_enabled is not True:
            return False
        return meets_threshold(
            logging_level,
            settings.user_logging_level.ordinal,
            settings.supported_logging_levels,
        )

    def _is_eligible(
        self,
        logging_level: LoggingLevel | str,
        settings: ComponentLoggerSettings | None,
    ) -> bool:
        try:
            return self._meets_user_logging_level(logging_level, settings)
        except SettingsUnavailableError:
            return False

    def _new_entry(
        self, logging_level: LoggingLevel | str, message: Any
    ) -> LogEntryBuilder:
        level = normalize_level(logging_level)
        # One snapshot per call so both gate checks agree
        settings = self._settings
        should_save = self._is_eligible(level, settings)
        console_enabled = bool(
            settings is not None and settings.is_console_logging_enabled
        )

        entry = self._entry_factory(level, should_save, console_enabled)
        with self._lock:
            if self._scenario:
                entry.scenario = self._scenario
        # The console echo reads the scenario
        entry.set_message(message)

        with self._lock:
            if self._scenario:
                entry.scenario = self._scenario
            buffered = self._is_eligible(level, settings)
            if buffered:
                self._buffer.append(entry)

        if buffered:
            self._metrics.record_entry_buffered(level)
        else:
            self._metrics.record_entry_filtered(level)
        return entry
