"""
Generated test data and its cleanup.

Every generated post carries the ``E2E`` marker in its title and content so
the cleanup pass can find leftovers from interrupted runs by content alone.

Key Concepts Demonstrated:
- Faker-backed factories with unique suffixes
- Heuristic cleanup of suite-owned records
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from faker import Faker

from blog_e2e.api_client import ApiClient
from blog_e2e.constants import TEST_DATA_MARKER, BlogStatus
from blog_e2e.log import resolve
from blog_e2e.messages import ApiMessages

logger = logging.getLogger(__name__)

TEST_POST_TITLE_PREFIX = "Test Blog Post"
TEST_CONTENT_MARKER = f"{TEST_DATA_MARKER} testing"
CLEANUP_PAGE_SIZE = 100


def _unique_suffix() -> str:
    return uuid.uuid4().hex[:8]


class TestDataGenerator:
    """Builds payloads for the API and the admin editor."""

    __test__ = False

    def __init__(self, faker: Faker | None = None):
        self.fake = faker or Faker()

    def blog_post(
        self,
        title: str | None = None,
        content: str | None = None,
        status: BlogStatus = BlogStatus.DRAFT,
        **overrides: Any,
    ) -> dict[str, Any]:
        """
        Payload for a suite-owned blog post.

        Args:
            title: Title; a marked, unique title is generated when omitted.
            content: Body; generated paragraphs plus the marker when omitted.
            status: Draft or published.
            **overrides: Any other post fields.
        """
        suffix = _unique_suffix()
        payload: dict[str, Any] = {
            "title": title or f"{TEST_POST_TITLE_PREFIX} {TEST_DATA_MARKER} {suffix}",
            "content": content
            or "\n\n".join([*self.fake.paragraphs(nb=3), f"Created for {TEST_CONTENT_MARKER}."]),
            "excerpt": self.fake.sentence(nb_words=12),
            "status": status.value,
            "hide_link": False,
            "seo_meta": {
                "title": f"{TEST_DATA_MARKER} {self.fake.sentence(nb_words=5)}",
                "description": self.fake.sentence(nb_words=15),
                "keywords": ", ".join(self.fake.words(nb=4)),
            },
        }
        payload.update(overrides)
        return payload

    def user(self, role: str = "user") -> dict[str, str]:
        suffix = _unique_suffix()
        return {
            "name": f"{self.fake.name()} {TEST_DATA_MARKER}",
            "email": f"e2e-{suffix}@{self.fake.domain_name()}",
            "password": self.fake.password(length=16, special_chars=True),
            "role": role,
        }

    def search_terms(self, count: int = 3) -> list[str]:
        return self.fake.words(nb=count, unique=True)


def is_test_post(post: dict[str, Any]) -> bool:
    """True for posts created by the suite, judged by title and content."""
    title = post.get("title") or ""
    content = post.get("content") or ""
    return (
        TEST_POST_TITLE_PREFIX in title
        or TEST_DATA_MARKER in title
        or TEST_CONTENT_MARKER in content
    )


class TestDataCleanup:
    """Deletes suite-owned posts through the API."""

    __test__ = False

    def __init__(self, api_client: ApiClient, run_logger: logging.Logger | None = None):
        self.api_client = api_client
        self.logger = resolve(run_logger, logger)

    def cleanup_test_blog_posts(self) -> int:
        """
        Delete every post that carries the test marker.

        Returns:
            Number of posts deleted.
        """
        self.logger.info(ApiMessages.CLEANUP_STARTED)
        result = self.api_client.get_blog_posts(status="all", limit=CLEANUP_PAGE_SIZE)
        if result is None:
            self.logger.warning(ApiMessages.CLEANUP_FAILED, "could not list blog posts")
            return 0

        deleted = 0
        for post in filter(is_test_post, result["posts"]):
            if self.api_client.delete_blog_post(post["id"]):
                deleted += 1
                self.logger.debug(ApiMessages.TEST_POST_DELETED, post.get("title"))

        self.logger.info(ApiMessages.CLEANUP_COMPLETED, deleted)
        return deleted
