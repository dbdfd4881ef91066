"""
Shared pytest setup for the blog suite.

Suite fixtures (configuration, run logger, admin session state and the
per-test fixture universe) come from :mod:`blog_e2e.plugin`. The helpers
below build MagicMock fakes of Playwright objects for unit tests, so those
run without a browser or a running application.

Key Concepts Demonstrated:
- Plugin-provided fixtures
- Mock Playwright pages and locators
- Environment isolation with monkeypatch
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

pytest_plugins = ["blog_e2e.plugin"]


SUITE_ENV_VARS = (
    "TARGET",
    "TEST_ENV",
    "TEST_BASE_URL",
    "TEST_BASE_URL_LOCAL",
    "TEST_BASE_URL_PROD",
    "API_BASE_URL",
    "ADMIN_EMAIL",
    "ADMIN_PASSWORD",
    "TEST_USER_EMAIL",
    "TEST_USER_PASSWORD",
    "PROTECTED_LOGIN_PATH",
    "PROTECTED_DASHBOARD_PATH",
    "PROTECTED_CONTENT_CREATE_PATH",
    "AUTH_STATE_DIR",
    "TEST_RESULTS_DIR",
    "CI",
    "DOCKER",
    "HEADED",
    "HEADLESS",
    "CLEANUP_TEMP_FILES",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every suite variable so configuration falls back to defaults."""
    for name in SUITE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def quiet_logger():
    """Logger that records calls instead of printing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def mock_page():
    """
    A fake Playwright page.

    ``wait_for_timeout`` is a no-op so retry loops run instantly; tests
    inspect its calls to check the delays that would have been waited.
    """
    page = MagicMock(name="page")
    page.url = "http://localhost:3000/"
    page.viewport_size = {"width": 1280, "height": 720}
    return page


@pytest.fixture
def make_locator(mock_page):
    """Factory for fake locators bound to ``mock_page``."""

    def _make(name: str = "locator", value: str = "") -> MagicMock:
        locator = MagicMock(name=name)
        locator.page = mock_page
        locator.input_value.return_value = value
        return locator

    return _make
