"""Shared fixtures for icalgen tests."""

from typing import Any

import pytest

from icalgen.builder import CalendarBuilder
from icalgen.config import ICalGenSettings, get_settings
from tests.fixtures.calendar_documents import CalendarDocumentFactory, fixed_clock, sequential_ids


@pytest.fixture
def documents() -> type[CalendarDocumentFactory]:
    """JSON calendar document factory."""
    return CalendarDocumentFactory


@pytest.fixture
def fixed_builder() -> CalendarBuilder:
    """Builder with a pinned clock and sequential ids for reproducible output."""
    return CalendarBuilder(clock=fixed_clock, id_factory=sequential_ids())


@pytest.fixture
def test_settings() -> ICalGenSettings:
    """Settings independent of the host environment."""
    return ICalGenSettings(debug=False, log_level="ERROR")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Any:
    """Keep ICALGEN_* variables and cached settings from leaking between tests."""
    for key in ("ICALGEN_DEBUG", "ICALGEN_LOG_LEVEL", "ICALGEN_OUTPUT_EXTENSION", "ICALGEN_SOURCE_EXTENSION"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def pytest_configure(config: Any) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "fast: Tests that run in milliseconds")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")
