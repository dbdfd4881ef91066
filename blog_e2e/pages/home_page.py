"""
Home Page object.

The landing page: hero content plus the "explore" cards that link to the
other public sections.
"""

from __future__ import annotations

from playwright.sync_api import Locator

from blog_e2e.assertions import expect_to_be_greater_than, expect_to_be_visible
from blog_e2e.constants import Paths
from blog_e2e.pages.base_page import BasePage

META_DESCRIPTION_MIN_LENGTH = 50


class HomePage(BasePage):
    """Page object for the public home page."""

    path = Paths.HOME

    # -------------------------------------------------------------------------
    # Locators
    # -------------------------------------------------------------------------

    @property
    def hero_subtitle(self) -> Locator:
        return self.page.get_by_test_id("hero-subtitle")

    @property
    def hero_description(self) -> Locator:
        return self.page.get_by_test_id("hero-description")

    @property
    def explore_section(self) -> Locator:
        return self.page.get_by_test_id("home-navigation-section")

    @property
    def about_button(self) -> Locator:
        return self.page.get_by_test_id("home-about-button")

    @property
    def cv_button(self) -> Locator:
        return self.page.get_by_test_id("home-cv-button")

    @property
    def links_button(self) -> Locator:
        return self.page.get_by_test_id("home-links-button")

    @property
    def blog_button(self) -> Locator:
        return self.page.get_by_test_id("home-blog-button")

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def click_blog_card(self) -> None:
        self.safe_click(self.blog_button)
        self.wait_for_page_load()

    def click_about_card(self) -> None:
        self.safe_click(self.about_button)
        self.wait_for_page_load()

    def get_meta_description(self) -> str | None:
        return self.meta_description.get_attribute("content")

    # -------------------------------------------------------------------------
    # Assertions
    # -------------------------------------------------------------------------

    def assert_page_loaded(self) -> None:
        expect_to_be_visible(self.navigation, run_logger=self.logger)

    def assert_hero_content(self) -> None:
        expect_to_be_visible(self.hero_description, run_logger=self.logger)

    def assert_explore_section_visible(self) -> None:
        for locator in (
            self.explore_section,
            self.about_button,
            self.cv_button,
            self.links_button,
            self.blog_button,
        ):
            expect_to_be_visible(locator, run_logger=self.logger)

    def assert_seo_elements(self) -> None:
        description = self.get_meta_description() or ""
        expect_to_be_greater_than(
            len(description),
            META_DESCRIPTION_MIN_LENGTH,
            message="Meta description is missing or too short",
            run_logger=self.logger,
        )
