"""
Admin Login Page object.

The login route itself comes from configuration and is passed in, so no
protected path is baked into the page object.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from playwright.sync_api import Locator, Page

from blog_e2e.assertions import (
    expect_page_url_to_contain,
    expect_to_be_attached,
    expect_to_be_visible,
)
from blog_e2e.config import Credentials
from blog_e2e.constants import Timeouts
from blog_e2e.pages.base_page import SCREENSHOTS_DIR, BasePage


class AdminLoginPage(BasePage):
    """
    Page object for the admin login form.

    Attributes:
        path: Login route.
        dashboard_path: Route the login redirects to on success.
    """

    def __init__(
        self,
        page: Page,
        base_url: str,
        login_path: str,
        dashboard_path: str,
        logger: logging.Logger | None = None,
        screenshots_dir: Path = SCREENSHOTS_DIR,
    ):
        super().__init__(page, base_url, logger, screenshots_dir)
        self.path = login_path
        self.dashboard_path = dashboard_path

    # -------------------------------------------------------------------------
    # Locators
    # -------------------------------------------------------------------------

    @property
    def email_input(self) -> Locator:
        return self.page.get_by_test_id("admin-login-email-input")

    @property
    def password_input(self) -> Locator:
        return self.page.get_by_test_id("admin-login-password-input")

    @property
    def submit_button(self) -> Locator:
        return self.page.get_by_test_id("admin-login-submit-button")

    @property
    def login_form(self) -> Locator:
        return self.page.get_by_test_id("admin-login-form")

    @property
    def error_message(self) -> Locator:
        return self.page.get_by_text(re.compile(r"invalid|fehler|unauthorized", re.IGNORECASE))

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def goto_login(self) -> AdminLoginPage:
        self.goto(self.path)
        self.assert_page_loaded()
        return self

    def fill_credentials(self, email: str, password: str) -> AdminLoginPage:
        self.safe_fill(self.email_input, email)
        self.safe_fill(self.password_input, password, sensitive=True)
        return self

    def submit(self) -> None:
        self.safe_click(self.submit_button)

    def login(
        self,
        email: str,
        password: str,
        wait_for_redirect: bool = True,
        timeout: int = Timeouts.LOGIN,
    ) -> None:
        """
        Submit the login form.

        Args:
            email: Account email.
            password: Account password.
            wait_for_redirect: Wait for the dashboard route afterwards.
            timeout: Redirect timeout in milliseconds.

        Raises:
            playwright.sync_api.TimeoutError: If the redirect does not happen.
        """
        self.fill_credentials(email, password)
        self.submit()
        if wait_for_redirect:
            self.wait_for_url(f"**{self.dashboard_path}*", timeout)

    def login_with(self, credentials: Credentials, **kwargs) -> None:
        self.login(credentials.email, credentials.password, **kwargs)

    def is_login_form_visible(self) -> bool:
        return all(
            self.is_element_visible(locator)
            for locator in (self.email_input, self.password_input, self.submit_button)
        )

    # -------------------------------------------------------------------------
    # Assertions
    # -------------------------------------------------------------------------

    def assert_page_loaded(self) -> None:
        expect_to_be_visible(
            self.email_input,
            message="Email input not found on login page",
            run_logger=self.logger,
        )
        expect_to_be_visible(
            self.password_input,
            message="Password input not found on login page",
            run_logger=self.logger,
        )
        # The submit button may start disabled; attached is enough.
        expect_to_be_attached(self.submit_button, run_logger=self.logger)
        expect_page_url_to_contain(self.page, self.path, run_logger=self.logger)

    def assert_login_error(self) -> None:
        expect_to_be_visible(self.error_message.first, run_logger=self.logger)

    def assert_login_success(self) -> None:
        expect_page_url_to_contain(self.page, self.dashboard_path, run_logger=self.logger)
