"""Pytest configuration and shared fixtures.

The project root is put on sys.path by ``pythonpath`` in pyproject.toml, so
``src`` resolves to this checkout rather than any installed copy.
"""

from collections.abc import Iterator

import pytest

from src.config.settings import get_settings
from src.core.services.asset_request_coalescer import reset_asset_coalescer


@pytest.fixture(autouse=True)
def _fresh_singletons() -> Iterator[None]:
    """Settings and the process-wide coalescer are cached; reset around each test."""
    get_settings.cache_clear()
    reset_asset_coalescer()
    yield
    get_settings.cache_clear()
    reset_asset_coalescer()
