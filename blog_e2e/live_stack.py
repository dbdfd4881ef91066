"""Reachability checks for the application under test."""

from __future__ import annotations

import time

import pytest
import requests

from blog_e2e.config import Config


def is_app_reachable(url: str, timeout: int = 2) -> bool:
    """Return True when ``url`` answers with a non-5xx status."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException:
        return False
    return response.status_code < 500


def wait_for_app(url: str, timeout: int = 60, interval: int = 1) -> None:
    """Poll ``url`` until it is reachable or ``timeout`` seconds pass."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if is_app_reachable(url):
            return
        time.sleep(interval)
    raise RuntimeError(f"Application at {url} not reachable after {timeout}s")


def require_live_app(config: Config) -> str:
    """
    Return the base URL of the running app, skipping the test when it is down.

    Set ``TEST_BASE_URL`` (or ``TEST_BASE_URL_<TARGET>``) to point at a stack.
    """
    if not is_app_reachable(config.base_url):
        pytest.skip(
            f"Application at {config.base_url} is not reachable; "
            "set TEST_BASE_URL to run live tests"
        )
    return config.base_url
