"""
Root pytest configuration.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "critical: Tests that must never fail - core functionality",
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests exercising HTTP adapters end to end",
    )
    config.addinivalue_line(
        "markers",
        "property: Property-based tests (may be slow)",
    )


@pytest.fixture(autouse=True)
def reset_diagnostics() -> Generator[None, None, None]:
    """Reset the diagnostics writer and cached enablement around each test.

    The diagnostics module caches ``internal_logging_enabled`` on first use;
    resetting keeps tests from inheriting each other's environment.
    """
    import batchlog.core.diagnostics as diag

    diag._reset_for_tests()
    yield
    diag._reset_for_tests()


@pytest.fixture
def captured_diagnostics(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[list[dict], None, None]:
    """Capture every diagnostics payload, with gated diagnostics enabled."""
    import batchlog.core.diagnostics as diag

    monkeypatch.setenv("BATCHLOG_CORE__INTERNAL_LOGGING_ENABLED", "true")
    captured: list[dict] = []
    diag.set_writer_for_tests(captured.append)
    yield captured
