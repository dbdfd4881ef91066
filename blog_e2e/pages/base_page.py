"""
Base Page class for the Page Object Model.

Every concrete page composes the shared capabilities (navigation, viewport,
dialogs) and the retrying action wrappers through this class, and declares
its own readiness check.

Key Concepts Demonstrated:
- Composition of small capability helpers
- data-testid locators, built fresh on every access
- Retrying actions with an explicit per-run logger
- Abstract readiness contract per page
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from re import Pattern
from typing import TypeVar

from playwright.sync_api import Locator, Page
from playwright.sync_api import Error as PlaywrightError

from blog_e2e import actions
from blog_e2e.actions import DEFAULT_OPTIONS, ActionOptions
from blog_e2e.assertions import expect_to_be_visible
from blog_e2e.constants import Paths, Timeouts, ViewportClass
from blog_e2e.log import resolve
from blog_e2e.messages import BasePageMessages
from blog_e2e.pages.capabilities import (
    DialogAction,
    DialogExpectation,
    DialogHandler,
    Navigator,
    ViewportInspector,
)

T = TypeVar("T")

SCREENSHOTS_DIR = Path("test-results") / "screenshots"
SUBMIT_SELECTOR = 'button[type="submit"], input[type="submit"]'


class BasePage(ABC):
    """
    Base class for all page objects.

    Attributes:
        page: Playwright page instance.
        base_url: Base URL of the application.
        logger: Per-run logger handed down by the fixture scope.
        navigator: Navigation and load waiting.
        viewport: Viewport classification.
        dialogs: One-shot dialog expectations.
    """

    path: str = Paths.HOME

    def __init__(
        self,
        page: Page,
        base_url: str,
        logger: logging.Logger | None = None,
        screenshots_dir: Path = SCREENSHOTS_DIR,
    ):
        """
        Initialize the base page.

        Args:
            page: Playwright page instance.
            base_url: Base URL of the application.
            logger: Per-run logger; falls back to this module's logger.
            screenshots_dir: Directory for :meth:`take_screenshot`.
        """
        self.page = page
        self.base_url = base_url.rstrip("/")
        self.logger = resolve(logger, logging.getLogger(__name__))
        self.screenshots_dir = screenshots_dir
        self.navigator = Navigator(page, self.base_url, self.logger)
        self.viewport = ViewportInspector(page, self.logger)
        self.dialogs = DialogHandler(page, self.logger)

    # -------------------------------------------------------------------------
    # Common Locators
    # -------------------------------------------------------------------------

    @property
    def navigation(self) -> Locator:
        return self.page.locator("header")

    @property
    def navigation_toggle(self) -> Locator:
        return self.page.get_by_test_id("navigation-toggle")

    @property
    def nav_home(self) -> Locator:
        return self.page.get_by_test_id("nav-home-link")

    @property
    def nav_about(self) -> Locator:
        return self.page.get_by_test_id("nav-about-link")

    @property
    def nav_blog(self) -> Locator:
        return self.page.get_by_test_id("nav-blog-link")

    @property
    def nav_cv(self) -> Locator:
        return self.page.get_by_test_id("nav-cv-link")

    @property
    def nav_links(self) -> Locator:
        return self.page.get_by_test_id("nav-links-link")

    @property
    def footer(self) -> Locator:
        return self.page.get_by_test_id("footer")

    @property
    def footer_text(self) -> Locator:
        return self.footer.get_by_test_id("footer-text")

    @property
    def meta_description(self) -> Locator:
        return self.page.locator('meta[name="description"]')

    # -------------------------------------------------------------------------
    # Navigation Methods
    # -------------------------------------------------------------------------

    def goto(self, path: str = "") -> None:
        """
        Navigate to a path relative to the base URL and wait for load.

        Args:
            path: URL path; defaults to the page's own route.
        """
        self.navigator.goto(path or self.path)

    def open(self) -> BasePage:
        """Navigate to the page's route and check it is ready."""
        self.goto(self.path)
        self.assert_page_loaded()
        return self

    def reload(self) -> None:
        self.navigator.reload()

    def go_back(self) -> None:
        self.navigator.go_back()

    def go_forward(self) -> None:
        self.navigator.go_forward()

    def click_nav_blog(self) -> None:
        self.safe_click(self.nav_blog)
        self.wait_for_page_load()

    def click_nav_home(self) -> None:
        self.safe_click(self.nav_home)
        self.wait_for_page_load()

    def open_mobile_menu(self) -> None:
        if self.is_element_visible(self.navigation_toggle):
            self.safe_click(self.navigation_toggle)

    # -------------------------------------------------------------------------
    # Wait Methods
    # -------------------------------------------------------------------------

    def wait_for_page_load(self, timeout: int = Timeouts.PAGE_LOAD) -> None:
        """Wait for network idle and a complete document within one deadline."""
        self.navigator.wait_for_page_load(timeout)

    def wait_for_element(
        self, locator: Locator, timeout: int = Timeouts.ELEMENT_VISIBLE
    ) -> Locator:
        """
        Wait for an element to be visible.

        Args:
            locator: Playwright locator for the element.
            timeout: Maximum wait time in milliseconds.

        Returns:
            The same locator, for chaining.
        """
        locator.wait_for(state="visible", timeout=timeout)
        return locator

    def wait_for_url(
        self, url: str | Pattern[str] | Callable[[str], bool], timeout: int = Timeouts.REDIRECT
    ) -> None:
        self.navigator.wait_for_url(url, timeout)

    # -------------------------------------------------------------------------
    # Action Methods
    # -------------------------------------------------------------------------

    def safe_click(self, locator: Locator, options: ActionOptions = DEFAULT_OPTIONS) -> None:
        actions.safe_click(locator, options, run_logger=self.logger)

    def safe_fill(
        self,
        locator: Locator,
        text: str,
        options: ActionOptions = DEFAULT_OPTIONS,
        clear: bool = True,
        validate: bool = True,
        sensitive: bool = False,
    ) -> None:
        actions.safe_fill(
            locator,
            text,
            options,
            clear=clear,
            validate=validate,
            sensitive=sensitive,
            run_logger=self.logger,
        )

    def safe_select_option(
        self,
        locator: Locator,
        option: str | Sequence[str],
        options: ActionOptions = DEFAULT_OPTIONS,
    ) -> list[str]:
        return actions.safe_select_option(locator, option, options, run_logger=self.logger)

    def safe_type(
        self,
        locator: Locator,
        text: str,
        delay: int = 100,
        options: ActionOptions = DEFAULT_OPTIONS,
    ) -> None:
        actions.safe_type(locator, text, delay, options, run_logger=self.logger)

    def retry_action(
        self,
        action: Callable[[], T],
        retries: int = 3,
        delay: int = Timeouts.POLLING_INTERVAL,
    ) -> T:
        """Retry an arbitrary callable, pausing on the page between attempts."""
        return actions.retry_action(
            action,
            retries=retries,
            delay=delay,
            sleep=self.page.wait_for_timeout,
            run_logger=self.logger,
        )

    def fill_form(self, fields: Mapping[str, str], sensitive: Collection[str] = ()) -> None:
        """
        Fill several fields located by name, data-testid or id.

        Args:
            fields: Mapping of field key to value.
            sensitive: Keys whose values must never be logged.
        """
        self.logger.debug(BasePageMessages.FILLING_FORM, ", ".join(fields))
        for name, value in fields.items():
            locator = self.page.locator(f'[name="{name}"], [data-testid="{name}"], #{name}').first
            self.safe_fill(locator, value, sensitive=name in sensitive)

    def submit_form(self, selector: str = SUBMIT_SELECTOR) -> None:
        self.logger.debug(BasePageMessages.SUBMITTING_FORM)
        self.safe_click(self.page.locator(selector).first)

    def handle_dialog(
        self,
        trigger: Callable[[], object],
        action: DialogAction = "accept",
        expected: str | None = None,
    ) -> DialogExpectation:
        """Arm a one-shot dialog handler, then run the action that opens the dialog."""
        return self.dialogs.handle(trigger, action, expected)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    def is_element_visible(self, locator: Locator, timeout: int = Timeouts.SHORT) -> bool:
        """
        Check visibility without raising.

        Returns:
            False when the element does not become visible within ``timeout``,
            including when nothing or more than one element matches the locator.
        """
        try:
            locator.wait_for(state="visible", timeout=timeout)
        except PlaywrightError:
            return False
        return True

    def is_element_enabled(self, locator: Locator) -> bool:
        return locator.is_enabled(timeout=Timeouts.DEFAULT)

    def get_element_count(self, locator: Locator) -> int:
        return locator.count()

    def get_element_text(self, locator: Locator) -> str:
        return locator.text_content(timeout=Timeouts.DEFAULT) or ""

    def get_element_value(self, locator: Locator) -> str:
        return locator.input_value(timeout=Timeouts.DEFAULT)

    def get_page_title(self) -> str:
        return self.page.title()

    @property
    def current_url(self) -> str:
        return self.page.url

    def viewport_class(self) -> ViewportClass:
        return self.viewport.viewport_class()

    # -------------------------------------------------------------------------
    # Assertion Methods
    # -------------------------------------------------------------------------

    @abstractmethod
    def assert_page_loaded(self) -> None:
        """Raise ``AssertionError`` unless the page shows its ready state."""

    def assert_navigation_visible(self) -> None:
        for locator in (self.navigation, self.nav_home, self.nav_about, self.nav_blog, self.nav_cv):
            expect_to_be_visible(locator, run_logger=self.logger)

    def assert_footer_visible(self) -> None:
        expect_to_be_visible(self.footer, run_logger=self.logger)
        expect_to_be_visible(self.footer_text, run_logger=self.logger)

    def assert_mobile_navigation_visible(self) -> None:
        expect_to_be_visible(self.navigation_toggle, run_logger=self.logger)

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def measure_page_load_time(self) -> int:
        """Milliseconds spent in :meth:`wait_for_page_load`."""
        start = time.monotonic()
        self.wait_for_page_load()
        elapsed = int((time.monotonic() - start) * 1000)
        self.logger.debug(BasePageMessages.PAGE_LOAD_TIME, elapsed)
        return elapsed

    def take_screenshot(self, name: str, full_page: bool = True) -> Path:
        """
        Take a screenshot of the current page.

        Args:
            name: Name for the screenshot file; a timestamp is appended.
            full_page: Capture the full scrollable page.

        Returns:
            Path to the saved screenshot.
        """
        self.screenshots_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
        path = self.screenshots_dir / f"screenshot-{name}-{timestamp}.png"
        self.page.screenshot(path=str(path), full_page=full_page)
        self.logger.info(BasePageMessages.SCREENSHOT_SAVED, path)
        return path
