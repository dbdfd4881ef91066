"""
Fixture universes: which resources a test gets and how they are wired.

- ``authenticated``: browser context seeded from the admin session state,
  a guest page in a separate fresh context, an API client logged in as
  admin, page objects for public and admin screens, and admin workflows.
- ``guest``: fresh context without any session state; public pages and the
  login form only.
- ``api``: HTTP session and API client, no browser.

Each universe is a frozen :class:`~blog_e2e.fixture_graph.FixtureGraph`.
A test picks one explicitly; tests written against the same fixture names
run unchanged in either browser universe.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import requests
from playwright.sync_api import Browser, BrowserContext, Page

from blog_e2e.api_client import ApiClient, build_api_session
from blog_e2e.config import Config
from blog_e2e.data_factory import TestDataCleanup, TestDataGenerator
from blog_e2e.errors import AuthSetupError, UnknownFixtureError
from blog_e2e.fixture_graph import FixtureGraph
from blog_e2e.messages import FixtureMessages, SetupErrors
from blog_e2e.pages import (
    AdminDashboardPage,
    AdminLoginPage,
    BlogEditorPage,
    BlogPage,
    HomePage,
)
from blog_e2e.session_state import is_redirected_to_login
from blog_e2e.workflows import create_workflows

AUTHENTICATED = "authenticated"
GUEST = "guest"
API = "api"
DEFAULT_UNIVERSE = AUTHENTICATED

CONTEXT_OPTIONS = {
    "viewport": {"width": 1280, "height": 720},
    "ignore_https_errors": True,
}

BROWSER_EXTERNALS = ("browser", "config", "run_logger")


# =============================================================================
# Shared factories
# =============================================================================


def _open_context(browser: Browser, **options) -> Generator[BrowserContext, None, None]:
    context = browser.new_context(**CONTEXT_OPTIONS, **options)
    try:
        yield context
    finally:
        context.close()


def _open_page(context: BrowserContext) -> Generator[Page, None, None]:
    page = context.new_page()
    try:
        yield page
    finally:
        page.close()


def api(config: Config, run_logger: logging.Logger) -> Generator[requests.Session, None, None]:
    run_logger.debug(FixtureMessages.CREATING_API_CONTEXT, config.api_url)
    session = build_api_session()
    try:
        yield session
    finally:
        session.close()
        run_logger.debug(FixtureMessages.API_CONTEXT_CLOSED)


def admin_api_client(
    api: requests.Session, config: Config, run_logger: logging.Logger
) -> Generator[ApiClient, None, None]:
    """API client logged in as admin. A failed handshake only warns."""
    client = ApiClient(api, config, run_logger)
    if config.admin_credentials.is_configured:
        if client.login_as_admin():
            run_logger.info(FixtureMessages.API_CLIENT_AUTHENTICATED)
        else:
            run_logger.warning(FixtureMessages.API_CLIENT_AUTH_FAILED)

    yield client

    if client.is_authenticated:
        if client.logout():
            run_logger.debug(FixtureMessages.API_CLIENT_LOGGED_OUT)
        else:
            run_logger.debug(FixtureMessages.API_LOGOUT_ERROR, "logout request failed")


def anonymous_api_client(
    api: requests.Session, config: Config, run_logger: logging.Logger
) -> ApiClient:
    return ApiClient(api, config, run_logger)


def _test_data() -> TestDataGenerator:
    return TestDataGenerator()


def blog_cleanup(
    api_client: ApiClient, run_logger: logging.Logger
) -> Generator[TestDataCleanup, None, None]:
    """Remove suite-owned posts after the test."""
    cleanup = TestDataCleanup(api_client, run_logger)
    yield cleanup
    if api_client.is_authenticated:
        cleanup.cleanup_test_blog_posts()


def home_page(page: Page, config: Config, run_logger: logging.Logger) -> HomePage:
    return HomePage(page, config.base_url, logger=run_logger, screenshots_dir=config.screenshots_dir)


def blog_page(page: Page, config: Config, run_logger: logging.Logger) -> BlogPage:
    return BlogPage(page, config.base_url, logger=run_logger, screenshots_dir=config.screenshots_dir)


def _login_page(page: Page, config: Config, run_logger: logging.Logger) -> AdminLoginPage:
    return AdminLoginPage(
        page,
        config.base_url,
        config.login_path,
        config.dashboard_path,
        logger=run_logger,
        screenshots_dir=config.screenshots_dir,
    )


# =============================================================================
# Authenticated universe
# =============================================================================


def _authenticated_context(
    browser: Browser, admin_storage_state: Path
) -> Generator[BrowserContext, None, None]:
    yield from _open_context(browser, storage_state=str(admin_storage_state))


def admin_page(page: Page, config: Config, run_logger: logging.Logger) -> Page:
    """
    The authenticated page, after checking the dashboard stays reachable.

    Raises:
        AuthSetupError: The protected route redirected to the login form.
    """
    run_logger.info(FixtureMessages.SETUP_ADMIN_PAGE)
    page.goto(config.url(config.dashboard_path))
    if is_redirected_to_login(page.url, config.login_path):
        run_logger.error(FixtureMessages.ADMIN_PAGE_SETUP_FAILED, page.url)
        raise AuthSetupError(SetupErrors.ADMIN_AUTH_INVALID)
    run_logger.info(FixtureMessages.ADMIN_AUTH_VERIFIED)
    return page


def guest_page(browser: Browser, run_logger: logging.Logger) -> Generator[Page, None, None]:
    """A page in its own context with no session state."""
    run_logger.info(FixtureMessages.SETUP_GUEST_PAGE)
    for context in _open_context(browser):
        yield from _open_page(context)


def build_authenticated() -> FixtureGraph:
    graph = FixtureGraph(AUTHENTICATED, provides=(*BROWSER_EXTERNALS, "admin_storage_state"))
    graph.register("context", _authenticated_context)
    graph.register("page", _open_page)
    graph.register("admin_page", admin_page)
    graph.register("guest_page", guest_page)
    graph.register("api", api)
    graph.register("api_client", admin_api_client)
    graph.register("test_data", _test_data)
    graph.register("blog_cleanup", blog_cleanup)
    graph.register("home_page", home_page)
    graph.register("blog_page", blog_page)

    @graph.fixture()
    def admin_login_page(guest_page, config, run_logger):
        return _login_page(guest_page, config, run_logger)

    @graph.fixture()
    def admin_dashboard_page(admin_page, config, run_logger):
        return AdminDashboardPage(
            admin_page,
            config.base_url,
            config.dashboard_path,
            logger=run_logger,
            screenshots_dir=config.screenshots_dir,
        )

    @graph.fixture()
    def blog_editor_page(admin_page, config, run_logger):
        return BlogEditorPage(
            admin_page,
            config.base_url,
            config.content_create_path,
            logger=run_logger,
            screenshots_dir=config.screenshots_dir,
        )

    @graph.fixture()
    def workflows(admin_page, config, test_data, run_logger):
        return create_workflows(admin_page, config, test_data, run_logger)

    return graph.freeze()


# =============================================================================
# Guest universe
# =============================================================================


def _guest_context(browser: Browser) -> Generator[BrowserContext, None, None]:
    yield from _open_context(browser)


def build_guest() -> FixtureGraph:
    graph = FixtureGraph(GUEST, provides=BROWSER_EXTERNALS)
    graph.register("context", _guest_context)
    graph.register("page", _open_page)
    graph.register("api", api)
    graph.register("api_client", anonymous_api_client)
    graph.register("test_data", _test_data)
    graph.register("home_page", home_page)
    graph.register("blog_page", blog_page)
    graph.register("admin_login_page", _login_page)
    return graph.freeze()


# =============================================================================
# API universe
# =============================================================================


def build_api() -> FixtureGraph:
    graph = FixtureGraph(API, provides=("config", "run_logger"))
    graph.register("api", api)
    graph.register("api_client", admin_api_client)
    graph.register("test_data", _test_data)
    graph.register("blog_cleanup", blog_cleanup)
    return graph.freeze()


UNIVERSES: dict[str, FixtureGraph] = {
    AUTHENTICATED: build_authenticated(),
    GUEST: build_guest(),
    API: build_api(),
}


def universe_for(name: str) -> FixtureGraph:
    """
    Return the fixture graph for a universe name.

    Raises:
        UnknownFixtureError: No universe with that name.
    """
    try:
        return UNIVERSES[name]
    except KeyError:
        raise UnknownFixtureError(
            f"Unknown fixture universe {name!r}; expected one of {sorted(UNIVERSES)}"
        ) from None
