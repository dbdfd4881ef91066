"""
Route interception helpers.

Tests block third-party trackers so page loads settle on ``networkidle``,
and fulfil API calls with canned JSON to reach states the backend cannot
produce on demand (empty lists, server errors).
"""

from __future__ import annotations

import json
import re
from typing import Any

from playwright.sync_api import Page, Route

from blog_e2e.constants import ANALYTICS_URL_PATTERN

ANALYTICS_RE = re.compile(ANALYTICS_URL_PATTERN)


def block_analytics(page: Page) -> None:
    """Abort every request to analytics and tag-manager hosts."""
    page.route(ANALYTICS_RE, lambda route: route.abort())


def mock_json_route(
    page: Page,
    pattern: str | re.Pattern[str],
    payload: Any,
    status: int = 200,
) -> None:
    """
    Answer requests matching ``pattern`` with ``payload`` as JSON.

    Args:
        page: Page whose requests are intercepted.
        pattern: Glob or compiled regex, as accepted by ``page.route``.
        payload: JSON-serialisable body.
        status: HTTP status of the mocked response.
    """
    body = json.dumps(payload)

    def handler(route: Route) -> None:
        route.fulfill(status=status, content_type="application/json", body=body)

    page.route(pattern, handler)
