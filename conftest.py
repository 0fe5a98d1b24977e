"""Pytest configuration for SoftDeleteable."""

import pytest

from softdeleteable.config import SoftDeleteableSettings, reset_config, set_config
from softdeleteable.soft_delete import events, listener, resolver


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add custom markers
    config.addinivalue_line("markers", "flush: test runs a real session flush")


@pytest.fixture(autouse=True)
def isolated_globals():
    """Give every test fresh settings and no global listeners or caches."""
    # Naive UTC markers compare cleanly with values read back from SQLite
    set_config(SoftDeleteableSettings(timezone_aware=False))
    resolver._resolver = None
    events._event_manager = None
    listener._listener = None

    yield

    reset_config()
    resolver._resolver = None
    events._event_manager = None
    listener._listener = None
