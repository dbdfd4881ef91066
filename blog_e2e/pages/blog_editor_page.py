"""Blog post editor page object."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from playwright.sync_api import Locator, Page

from blog_e2e.assertions import expect_to_be_visible
from blog_e2e.constants import BlogStatus
from blog_e2e.pages.base_page import SCREENSHOTS_DIR, BasePage


class BlogEditorPage(BasePage):
    def __init__(
        self,
        page: Page,
        base_url: str,
        create_path: str,
        logger: logging.Logger | None = None,
        screenshots_dir: Path = SCREENSHOTS_DIR,
    ):
        super().__init__(page, base_url, logger, screenshots_dir)
        self.path = create_path

    # -------------------------------------------------------------------------
    # Locators
    # -------------------------------------------------------------------------

    @property
    def title_input(self) -> Locator:
        return self.page.get_by_label(re.compile(r"title|titel", re.IGNORECASE)).first

    @property
    def content_editor(self) -> Locator:
        by_label = self.page.get_by_label(re.compile(r"content|inhalt", re.IGNORECASE))
        return by_label.or_(self.page.locator('[contenteditable="true"]')).first

    @property
    def status_select(self) -> Locator:
        return self.page.get_by_test_id("blog-status-select")

    @property
    def save_button(self) -> Locator:
        return self.page.get_by_role(
            "button", name=re.compile(r"save|publish|speichern|veröffentlichen", re.IGNORECASE)
        ).first

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def goto_new(self) -> BlogEditorPage:
        self.goto(self.path)
        return self

    def set_status(self, status: BlogStatus) -> None:
        if self.is_element_visible(self.status_select):
            self.safe_select_option(self.status_select, status.value)

    def create(self, title: str, content: str, status: BlogStatus | None = None) -> None:
        self.safe_fill(self.title_input, title)
        # Rich-text editors normalise whitespace, so the value is not read back.
        self.safe_fill(self.content_editor, content, validate=False)
        if status is not None:
            self.set_status(status)
        self.safe_click(self.save_button)
        self.wait_for_page_load()

    # -------------------------------------------------------------------------
    # Assertions
    # -------------------------------------------------------------------------

    def assert_page_loaded(self) -> None:
        expect_to_be_visible(self.title_input, run_logger=self.logger)
        expect_to_be_visible(self.content_editor, run_logger=self.logger)
        expect_to_be_visible(self.save_button, run_logger=self.logger)
