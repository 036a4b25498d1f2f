from __future__ import annotations

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from batchlog import ComponentLogger
from batchlog.core.levels import LoggingLevel
from batchlog.testing import (
    MockPersistenceSink,
    MockSettingsProvider,
    create_settings,
)

pytestmark = pytest.mark.property

level_names = st.sampled_from([lvl.value for lvl in LoggingLevel])

# Arbitrary ordinal assignments, including ties and negative values
ordinal_maps = st.fixed_dictionaries(
    {lvl.value: st.integers(min_value=-5, max_value=20) for lvl in LoggingLevel}
)

message_text = st.text(
    alphabet=st.characters(min_codepoint=32, max_codepoint=126),
    max_size=80,
)


def _logger(**settings_kwargs: object) -> ComponentLogger:
    provider = MockSettingsProvider(create_settings(**settings_kwargs))  # type: ignore[arg-type]
    logger = ComponentLogger(provider, MockPersistenceSink())
    asyncio.run(logger.ready())
    return logger


@given(
    user_level=level_names,
    levels=ordinal_maps,
    calls=st.lists(st.tuples(level_names, message_text), max_size=25),
)
@settings(max_examples=100, deadline=None)
def test_buffer_grows_only_for_levels_meeting_threshold(
    user_level: str, levels: dict[str, int], calls: list[tuple[str, str]]
) -> None:
    logger = _logger(user_level=user_level, supported_levels=levels)
    threshold = levels[user_level]

    for level, message in calls:
        before = logger.get_buffer_size()
        entry = getattr(logger, level.lower())(message)
        expected = 1 if threshold <= levels[level] else 0

        assert entry.message == message
        assert logger.get_buffer_size() == before + expected

    assert all(e.should_save for e in logger.get_buffer())


@given(
    messages=st.lists(message_text, min_size=1, max_size=10),
    scenario=message_text.filter(bool),
)
@settings(max_examples=50, deadline=None)
def test_scenario_applies_to_every_buffered_entry(
    messages: list[str], scenario: str
) -> None:
    logger = _logger(user_level="FINEST")
    for message in messages:
        logger.info(message)

    logger.set_scenario(scenario)

    assert logger.get_buffer_size() == len(messages)
    assert all(e.scenario == scenario for e in logger.get_buffer())


@given(
    ops=st.lists(st.sampled_from(["log", "flush", "save"]), max_size=30),
)
@settings(max_examples=50, deadline=None)
def test_flush_and_save_always_reset_buffer(ops: list[str]) -> None:
    logger = _logger(user_level="FINEST")
    expected = 0

    for op in ops:
        if op == "log":
            logger.debug("entry")
            expected += 1
        elif op == "flush":
            logger.flush_buffer()
            expected = 0
        else:
            logger.save_log()
            expected = 0
        assert logger.get_buffer_size() == expected
