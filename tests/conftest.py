"""Shared fixtures for the unvenv test suite."""

from __future__ import annotations

import logging
import os

import pytest
import structlog

from tests.helpers import LINUX_X64, WINDOWS_X64
from unvenv.config import Settings, get_settings
from unvenv.updater.models import PlatformTarget


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Drop any UNVENV_* variables from the real environment and reset the cache."""
    for key in list(os.environ):
        if key.upper().startswith("UNVENV_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _quiet_structlog():
    """Keep structlog's default stdout printer out of captured output."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL))
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def linux_target() -> PlatformTarget:
    return LINUX_X64


@pytest.fixture
def windows_target() -> PlatformTarget:
    return WINDOWS_X64
