from __future__ import annotations

import asyncio

import pytest

from batchlog import ClearPolicy, ComponentLogger, SaveMethod
from batchlog.plugins.sinks import InMemorySink
from batchlog.testing import (
    MockPersistenceSink,
    MockSettingsProvider,
    create_settings,
)


async def _logger(sink, settings=None, **kwargs) -> ComponentLogger:
    logger = ComponentLogger(
        MockSettingsProvider(settings or create_settings("FINEST")), sink, **kwargs
    )
    await logger.ready()
    return logger


@pytest.mark.asyncio
async def test_save_on_empty_buffer_does_not_call_sink() -> None:
    sink = MockPersistenceSink()
    logger = await _logger(sink)

    assert logger.save_log() is None
    assert logger.save_log("QUEUEABLE") is None
    assert sink.call_count == 0


@pytest.mark.critical
@pytest.mark.asyncio
async def test_save_passes_ordered_batch_and_method_then_clears() -> None:
    sink = MockPersistenceSink()
    logger = await _logger(sink)
    entry = logger.info("entry")

    task = logger.save_log("QUEUEABLE")

    assert logger.get_buffer_size() == 0
    assert task is not None
    assert await task is True
    assert sink.calls == [([entry], "QUEUEABLE")]


@pytest.mark.asyncio
async def test_default_save_method_from_settings() -> None:
    sink = MockPersistenceSink()
    logger = await _logger(
        sink, create_settings("FINEST", default_save_method_name="EVENT_BUS")
    )

    logger.info("a")
    await logger.save_log()
    logger.info("b")
    await logger.save_log("REST")
    logger.info("c")
    await logger.save_log("")

    assert [method for _, method in sink.calls] == ["EVENT_BUS", "REST", "EVENT_BUS"]


@pytest.mark.asyncio
async def test_missing_save_method_is_passed_as_none() -> None:
    sink = MockPersistenceSink()
    logger = await _logger(sink)
    logger.info("a")

    await logger.save_log()

    assert sink.calls[0][1] is None


@pytest.mark.asyncio
async def test_save_method_enum_is_passed_as_its_value() -> None:
    sink = MockPersistenceSink()
    logger = await _logger(sink)
    logger.info("a")

    await logger.save_log(SaveMethod.SYNCHRONOUS_DML)

    assert sink.calls[0][1] == "SYNCHRONOUS_DML"


@pytest.mark.critical
@pytest.mark.asyncio
async def test_failed_save_still_clears_buffer_on_initiate() -> None:
    sink = MockPersistenceSink(fail=True)
    logger = await _logger(sink)
    logger.error("lost")

    task = logger.save_log()
    assert logger.get_buffer_size() == 0

    assert task is not None
    assert await task is False
    assert logger.get_buffer_size() == 0
    assert logger.metrics.snapshot().save_failures == 1


@pytest.mark.asyncio
async def test_failed_save_reports_batch_when_console_logging_enabled(
    captured_diagnostics: list[dict],
) -> None:
    sink = MockPersistenceSink(fail=True)
    logger = await _logger(
        sink, create_settings("FINEST", is_console_logging_enabled=True)
    )
    logger.error("lost")

    await logger.save_log("QUEUEABLE")

    failures = [
        p
        for p in captured_diagnostics
        if p["component"] == "component-logger"
        and p["message"] == "failed to save log entries"
    ]
    assert len(failures) == 1
    assert failures[0]["level"] == "ERROR"
    assert failures[0]["error"] == "mock sink failure"
    assert failures[0]["save_method_name"] == "QUEUEABLE"
    assert [e["message"] for e in failures[0]["entries"]] == ["lost"]


@pytest.mark.asyncio
async def test_failed_save_without_console_logging_emits_no_error() -> None:
    captured: list[dict] = []
    import batchlog.core.diagnostics as diag

    diag.set_writer_for_tests(captured.append)
    sink = MockPersistenceSink(fail=True)
    logger = await _logger(sink)
    logger.error("lost")

    await logger.save_log()

    assert not [p for p in captured if p["level"] == "ERROR"]


@pytest.mark.asyncio
async def test_entries_after_save_start_a_new_batch() -> None:
    gate = asyncio.Event()
    sink = MockPersistenceSink(gate=gate)
    logger = await _logger(sink)
    logger.info("first batch")

    task = logger.save_log()
    logger.info("second batch")
    gate.set()
    await logger.drain()

    assert task is not None and task.done()
    assert [e.message for e in sink.calls[0][0]] == ["first batch"]
    assert [e.message for e in logger.get_buffer()] == ["second batch"]


@pytest.mark.asyncio
async def test_on_success_policy_keeps_batch_until_confirmed() -> None:
    gate = asyncio.Event()
    sink = MockPersistenceSink(gate=gate)
    logger = await _logger(sink, clear_policy=ClearPolicy.ON_SUCCESS)
    logger.info("a")
    logger.info("b")

    task = logger.save_log()
    assert logger.get_buffer_size() == 2
    logger.info("c")

    gate.set()
    assert task is not None and await task is True
    assert [e.message for e in logger.get_buffer()] == ["c"]
    assert logger.metrics.snapshot().entries_saved == 2


@pytest.mark.asyncio
async def test_on_success_policy_keeps_batch_after_failure() -> None:
    sink = MockPersistenceSink(fail=True)
    logger = await _logger(sink, clear_policy="on_success")
    logger.info("a")

    await logger.save_log()
    assert logger.get_buffer_size() == 1

    sink.fail = False
    await logger.save_log()
    assert logger.get_buffer_size() == 0
    assert len(sink.calls) == 2


@pytest.mark.critical
@pytest.mark.asyncio
async def test_on_success_policy_does_not_resend_pending_entries() -> None:
    gate = asyncio.Event()
    sink = MockPersistenceSink(gate=gate)
    logger = await _logger(sink, clear_policy=ClearPolicy.ON_SUCCESS)

    logger.info("a")
    first = logger.save_log()
    logger.info("b")
    second = logger.save_log()
    assert logger.save_log() is None

    gate.set()
    assert first is not None and await first is True
    assert second is not None and await second is True
    await logger.drain()

    assert [[e.message for e in batch] for batch, _ in sink.calls] == [["a"], ["b"]]
    assert logger.get_buffer_size() == 0


@pytest.mark.asyncio
async def test_on_success_failed_batch_is_sent_again_by_next_save() -> None:
    gate = asyncio.Event()
    sink = MockPersistenceSink(fail=True, gate=gate)
    logger = await _logger(sink, clear_policy=ClearPolicy.ON_SUCCESS)

    logger.info("a")
    task = logger.save_log()
    gate.set()
    assert task is not None and await task is False

    sink.fail = False
    await logger.save_log()

    assert [[e.message for e in batch] for batch, _ in sink.calls] == [["a"], ["a"]]
    assert logger.get_buffer_size() == 0


@pytest.mark.asyncio
async def test_context_manager_drains_pending_saves() -> None:
    sink = InMemorySink()
    logger = ComponentLogger(MockSettingsProvider(create_settings()), sink)

    async with logger:
        logger.info("a")
        logger.save_log("REST")

    assert len(sink.batches) == 1
    assert sink.batches[0][1] == "REST"


def test_save_without_running_loop_completes_synchronously() -> None:
    sink = InMemorySink()
    logger = ComponentLogger(MockSettingsProvider(create_settings()), sink)
    asyncio.run(logger.ready())
    logger.warn("sync host")

    result = logger.save_log()

    assert result is None
    assert logger.get_buffer_size() == 0
    assert [e.message for e in sink.entries] == ["sync host"]
