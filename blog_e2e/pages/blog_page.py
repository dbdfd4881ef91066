"""
Blog listing page object.

Covers search, the post card grid and pagination.
"""

from __future__ import annotations

from playwright.sync_api import Locator

from blog_e2e.assertions import (
    expect_to_be_greater_than,
    expect_to_be_visible,
    expect_to_contain_text,
    expect_to_have_value,
)
from blog_e2e.constants import Paths, Timeouts
from blog_e2e.locators import TestIdTemplate
from blog_e2e.pages.base_page import BasePage

PAGINATION_PAGE = TestIdTemplate("blog-pagination-page-{id}")


class BlogPage(BasePage):
    """Page object for the public blog listing."""

    path = Paths.BLOG

    # -------------------------------------------------------------------------
    # Locators
    # -------------------------------------------------------------------------

    @property
    def container(self) -> Locator:
        return self.page.get_by_test_id("blog-page-container")

    @property
    def hero_title(self) -> Locator:
        return self.page.get_by_test_id("blog-hero-title")

    @property
    def search_input(self) -> Locator:
        return self.page.get_by_test_id("blog-search-input")

    @property
    def search_button(self) -> Locator:
        return self.page.get_by_test_id("blog-search-button")

    @property
    def clear_search_button(self) -> Locator:
        return self.page.get_by_test_id("blog-clear-search")

    @property
    def search_results_title(self) -> Locator:
        return self.page.get_by_test_id("blog-search-results-title")

    @property
    def posts_grid(self) -> Locator:
        return self.page.get_by_test_id("blog-posts-grid")

    @property
    def blog_cards(self) -> Locator:
        return self.page.locator('[data-testid*="blog-card"]')

    @property
    def card_titles(self) -> Locator:
        return self.page.get_by_test_id("blog-card-title")

    @property
    def empty_state(self) -> Locator:
        return self.page.get_by_test_id("blog-empty-state")

    @property
    def no_search_results_title(self) -> Locator:
        return self.page.get_by_test_id("blog-no-search-results-title")

    @property
    def pagination(self) -> Locator:
        return self.page.get_by_test_id("blog-pagination-wrapper")

    @property
    def pagination_next(self) -> Locator:
        return self.page.get_by_test_id("blog-pagination-next")

    @property
    def pagination_prev(self) -> Locator:
        return self.page.get_by_test_id("blog-pagination-prev")

    def pagination_page(self, number: int) -> Locator:
        return PAGINATION_PAGE(self.page, number)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def search(self, term: str) -> None:
        self.safe_fill(self.search_input, term)
        self.safe_click(self.search_button)
        self.wait_for_page_load()

    def search_by_enter(self, term: str) -> None:
        self.safe_fill(self.search_input, term)
        self.search_input.press("Enter", timeout=Timeouts.DEFAULT)
        self.wait_for_page_load()

    def clear_search(self) -> None:
        if self.is_element_visible(self.clear_search_button):
            self.safe_click(self.clear_search_button)
            self.wait_for_page_load()

    def click_first_card(self) -> None:
        self.safe_click(self.card_titles.first)
        self.wait_for_page_load()

    def go_to_next_page(self) -> None:
        self.safe_click(self.pagination_next)
        self.wait_for_page_load()

    def go_to_page(self, number: int) -> None:
        self.safe_click(self.pagination_page(number))
        self.wait_for_page_load()

    def get_card_titles(self) -> list[str]:
        return [title.strip() for title in self.card_titles.all_text_contents()]

    def get_card_count(self) -> int:
        return self.get_element_count(self.card_titles)

    # -------------------------------------------------------------------------
    # Assertions
    # -------------------------------------------------------------------------

    def assert_page_loaded(self) -> None:
        expect_to_be_visible(self.container, run_logger=self.logger)
        expect_to_be_visible(self.hero_title, run_logger=self.logger)

    def assert_search_available(self) -> None:
        expect_to_be_visible(self.search_input, run_logger=self.logger)
        expect_to_be_visible(self.search_button, run_logger=self.logger)

    def assert_has_posts(self) -> None:
        expect_to_be_visible(self.posts_grid, run_logger=self.logger)
        expect_to_be_greater_than(self.get_card_count(), 0, run_logger=self.logger)

    def assert_search_results(self, query: str) -> None:
        expect_to_contain_text(self.search_results_title, query, run_logger=self.logger)

    def assert_no_search_results(self) -> None:
        expect_to_be_visible(self.no_search_results_title, run_logger=self.logger)

    def assert_search_input_value(self, expected: str) -> None:
        expect_to_have_value(self.search_input, expected, run_logger=self.logger)
