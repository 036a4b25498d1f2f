"""
Testing utilities for applications using batchlog.

Example:
    from batchlog import ComponentLogger
    from batchlog.testing import MockPersistenceSink, MockSettingsProvider
    from batchlog.testing import create_settings

    async def test_saves():
        sink = MockPersistenceSink()
        logger = ComponentLogger(MockSettingsProvider(create_settings()), sink)
        await logger.ready()
        logger.info("hello")
        await logger.save_log()
        assert sink.call_count == 1
"""

from .factories import create_settings
from .mocks import MockPersistenceSink, MockSettingsProvider

__all__ = [
    "MockPersistenceSink",
    "MockSettingsProvider",
    "create_settings",
]
