"""
Shared constants for page objects, fixtures and setup.

Nothing sensitive lives here: credentials and protected routes come from
the environment (see :mod:`blog_e2e.config`).
"""

from __future__ import annotations

from enum import Enum, IntEnum


class Timeouts(IntEnum):
    """Timeout tiers in milliseconds. Call sites pick a tier, never a literal."""

    DEFAULT = 10_000
    SHORT = 5_000
    MEDIUM = 15_000
    LONG = 30_000
    EXTRA_LONG = 60_000

    PAGE_LOAD = 30_000
    ELEMENT_VISIBLE = 10_000
    ELEMENT_HIDDEN = 5_000
    CLICK = 10_000
    FILL = 10_000
    TYPE = 15_000
    SELECT = 10_000

    API_REQUEST = 15_000
    FORM_SUBMIT = 20_000
    LOGIN = 15_000
    NAVIGATION = 30_000
    REDIRECT = 15_000

    POLLING_INTERVAL = 1_000
    RETRY_DELAY = 2_000


class Paths:
    """Public routes only."""

    HOME = "/"
    ABOUT = "/about"
    BLOG = "/blog"
    LINKS = "/links"
    CV = "/cv"
    NOT_FOUND = "/404"


class Breakpoints(IntEnum):
    """Upper bounds (inclusive) of each viewport class, in CSS pixels."""

    MOBILE = 768
    TABLET = 1024


class ViewportClass(str, Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"
    UNKNOWN = "unknown"


VIEWPORTS = {
    "mobile_small": {"width": 320, "height": 568},
    "mobile_medium": {"width": 375, "height": 667},
    "tablet_portrait": {"width": 768, "height": 1024},
    "tablet_landscape": {"width": 1024, "height": 768},
    "desktop_medium": {"width": 1440, "height": 900},
    "desktop_large": {"width": 1920, "height": 1080},
}


class Role(str, Enum):
    """Roles with a persisted session state."""

    ADMIN = "admin"
    TEST_USER = "test-user"

    @property
    def state_filename(self) -> str:
        return {Role.ADMIN: "admin.json", Role.TEST_USER: "testuser.json"}[self]


class BlogStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


# Posts whose title or content carries this marker belong to the suite and
# are removed by the cleanup pass.
TEST_DATA_MARKER = "E2E"

API_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "User-Agent": "Playwright-Test-Runner",
}
API_TIMEOUT_SECONDS = 30

# Parallel workers queue on this lock while one of them writes the session state.
AUTH_STATE_LOCK_TIMEOUT_SECONDS = 180

HEALTH_EXPECTED_STATUS = "OK"
HEALTH_REQUIRED_FIELDS = ("status", "timestamp")

# Blocked from every page in network mocks.
ANALYTICS_URL_PATTERN = r"google-analytics|googletagmanager|gtag|analytics\.js"

BLOG_POST_FIELDS = ("id", "title", "content", "status", "created_at", "updated_at", "seo_meta")
SEO_META_FIELDS = ("title", "description", "keywords")
USER_FIELDS = ("id", "name", "email", "role", "created_at", "updated_at")
PAGINATION_FIELDS = ("page", "limit", "total", "pages")
