"""
Admin Dashboard page object.

Per-post elements are addressed through typed ``TestIdTemplate`` locators
keyed by post id.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from playwright.sync_api import Locator, Page

from blog_e2e.assertions import (
    expect_to_be_visible,
    expect_to_equal,
    expect_to_have_count,
    expect_to_have_text,
)
from blog_e2e.constants import Timeouts
from blog_e2e.locators import TestIdTemplate
from blog_e2e.pages.base_page import SCREENSHOTS_DIR, BasePage
from blog_e2e.pages.capabilities import DialogExpectation

POST_ROW = TestIdTemplate("admin-dashboard-post-row-{id}")
POST_TITLE = TestIdTemplate("admin-dashboard-post-title-{id}")
POST_STATUS = TestIdTemplate("admin-dashboard-post-status-{id}")
POST_EDIT = TestIdTemplate("admin-dashboard-post-edit-{id}")
POST_VIEW = TestIdTemplate("admin-dashboard-post-view-{id}")
POST_PIN = TestIdTemplate("admin-dashboard-post-pin-{id}")
POST_UNPIN = TestIdTemplate("admin-dashboard-post-unpin-{id}")
POST_DELETE = TestIdTemplate("admin-dashboard-post-delete-{id}")

_ROW_ID = re.compile(r"admin-dashboard-post-row-(.+)")


@dataclass(frozen=True)
class DashboardStatistics:
    total_posts: int
    published_posts: int
    draft_posts: int
    total_likes: int


def _to_int(text: str | None) -> int:
    digits = re.sub(r"[^\d]", "", text or "")
    return int(digits) if digits else 0


class AdminDashboardPage(BasePage):
    """Page object for the admin dashboard."""

    def __init__(
        self,
        page: Page,
        base_url: str,
        dashboard_path: str,
        logger: logging.Logger | None = None,
        screenshots_dir: Path = SCREENSHOTS_DIR,
    ):
        super().__init__(page, base_url, logger, screenshots_dir)
        self.path = dashboard_path

    # -------------------------------------------------------------------------
    # Locators
    # -------------------------------------------------------------------------

    @property
    def page_wrapper(self) -> Locator:
        return self.page.get_by_test_id("admin-dashboard-page")

    @property
    def title(self) -> Locator:
        return self.page.get_by_test_id("admin-dashboard-title")

    @property
    def header_actions(self) -> Locator:
        return self.page.get_by_test_id("admin-dashboard-header-actions")

    @property
    def new_post_button(self) -> Locator:
        return self.page.get_by_test_id("admin-dashboard-new-post-button")

    @property
    def logout_button(self) -> Locator:
        return self.page.get_by_test_id("admin-dashboard-logout-button")

    @property
    def stats_section(self) -> Locator:
        return self.page.get_by_test_id("admin-dashboard-stats")

    @property
    def posts_table(self) -> Locator:
        return self.page.get_by_test_id("admin-dashboard-posts-table")

    @property
    def all_post_rows(self) -> Locator:
        return self.page.locator('[data-testid^="admin-dashboard-post-row-"]')

    def stat_value(self, name: str) -> Locator:
        return self.page.get_by_test_id(f"admin-dashboard-stat-{name}-value")

    def post_row(self, post_id: str | int) -> Locator:
        return POST_ROW(self.page, post_id)

    def post_title(self, post_id: str | int) -> Locator:
        return POST_TITLE(self.page, post_id)

    def post_status(self, post_id: str | int) -> Locator:
        return POST_STATUS(self.page, post_id)

    def edit_post_button(self, post_id: str | int) -> Locator:
        return POST_EDIT(self.page, post_id)

    def view_post_button(self, post_id: str | int) -> Locator:
        return POST_VIEW(self.page, post_id)

    def pin_post_button(self, post_id: str | int) -> Locator:
        return POST_PIN(self.page, post_id)

    def unpin_post_button(self, post_id: str | int) -> Locator:
        return POST_UNPIN(self.page, post_id)

    def delete_post_button(self, post_id: str | int) -> Locator:
        return POST_DELETE(self.page, post_id)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def go_to_new_post(self) -> None:
        self.safe_click(self.new_post_button)
        self.wait_for_page_load()

    def edit_post(self, post_id: str | int) -> None:
        self.safe_click(self.edit_post_button(post_id))
        self.wait_for_page_load()

    def view_post(self, post_id: str | int) -> None:
        self.safe_click(self.view_post_button(post_id))
        self.wait_for_page_load()

    def pin_post(self, post_id: str | int) -> None:
        self.safe_click(self.pin_post_button(post_id))
        self.wait_for_page_load()

    def unpin_post(self, post_id: str | int) -> None:
        self.safe_click(self.unpin_post_button(post_id))
        self.wait_for_page_load()

    def delete_post(self, post_id: str | int) -> DialogExpectation:
        """Delete a post, accepting the confirmation dialog."""
        expectation = self.handle_dialog(
            lambda: self.safe_click(self.delete_post_button(post_id)),
            action="accept",
            expected="delete",
        )
        self.post_row(post_id).wait_for(state="detached", timeout=Timeouts.MEDIUM)
        return expectation

    def logout(self) -> DialogExpectation:
        expectation = self.handle_dialog(lambda: self.safe_click(self.logout_button))
        self.wait_for_page_load()
        return expectation

    def get_statistics(self) -> DashboardStatistics:
        return DashboardStatistics(
            total_posts=_to_int(self.stat_value("total-posts").text_content()),
            published_posts=_to_int(self.stat_value("published-posts").text_content()),
            draft_posts=_to_int(self.stat_value("draft-posts").text_content()),
            total_likes=_to_int(self.stat_value("total-likes").text_content()),
        )

    def get_post_count(self) -> int:
        return self.get_element_count(self.all_post_rows)

    def get_first_post_id(self) -> str | None:
        first_row = self.all_post_rows.first
        if first_row.count() == 0:
            return None
        match = _ROW_ID.match(first_row.get_attribute("data-testid") or "")
        return match.group(1) if match else None

    # -------------------------------------------------------------------------
    # Assertions
    # -------------------------------------------------------------------------

    def assert_page_loaded(self) -> None:
        expect_to_be_visible(self.page_wrapper, run_logger=self.logger)
        expect_to_be_visible(self.title, run_logger=self.logger)
        expect_to_be_visible(self.logout_button, run_logger=self.logger)

    def assert_post_exists(self, post_id: str | int) -> None:
        expect_to_be_visible(self.post_row(post_id), run_logger=self.logger)
        expect_to_be_visible(self.post_title(post_id), run_logger=self.logger)

    def assert_post_not_exists(self, post_id: str | int) -> None:
        expect_to_have_count(self.post_row(post_id), 0, run_logger=self.logger)

    def assert_post_status(self, post_id: str | int, expected: str) -> None:
        expect_to_have_text(
            self.post_status(post_id), expected, ignore_case=True, run_logger=self.logger
        )

    def assert_statistics_consistent(self) -> None:
        stats = self.get_statistics()
        expect_to_equal(
            stats.published_posts + stats.draft_posts,
            stats.total_posts,
            message="Published and draft counts do not add up to the total",
            run_logger=self.logger,
        )
