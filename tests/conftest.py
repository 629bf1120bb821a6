"""Shared fixtures for shapecheck tests."""

import pytest

from shapecheck.config import get_config

CONFIG_ENV_VARS = (
    "SHAPECHECK_LOG_LEVEL",
    "SHAPECHECK_PATH_SEPARATOR",
    "SHAPECHECK_DEFAULT_UNKNOWN_KEYS",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from ambient SHAPECHECK_* settings and the config cache."""
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()
