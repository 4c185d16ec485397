"""Pytest fixtures for event-extractor tests."""

from datetime import date

import pytest

from src.config.settings import get_settings


@pytest.fixture
def reference_date() -> date:
    """A Friday, used as the anchor for relative dates."""
    return date(2024, 3, 15)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Keep cached settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
