"""
Authentication state pipeline.

Logs in once through the real login form and persists the browser session
so authenticated tests can start from a logged-in context. The steps run in
order and each is gated on the previous one:

1. ``prepare_directories`` - create the auth and screenshot directories.
2. ``login`` - submit credentials and wait for the protected dashboard.
3. ``capture_state`` - check the dashboard is ready, write the state file.
4. ``validate_state`` - reload the file into a fresh context and make sure
   the dashboard does not bounce back to the login route.

The pipeline can run as a setup phase before parallel workers start:

    python -m blog_e2e.auth_setup --role admin

Exit codes:

- ``0`` - state written and validated, or credentials not configured
- ``1`` - authentication failed; dependent tests must not run
- ``2`` - the script itself failed
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from filelock import FileLock
from filelock import Timeout as LockTimeout
from playwright.sync_api import Browser, Page
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from blog_e2e.config import Config, Credentials, get_config
from blog_e2e.constants import AUTH_STATE_LOCK_TIMEOUT_SECONDS, Role, Timeouts
from blog_e2e.errors import (
    ActionError,
    AuthSetupError,
    CredentialsMissing,
    SessionStateError,
)
from blog_e2e.log import close_run_logger, create_run_logger, resolve
from blog_e2e.messages import RunMessages, SetupErrors, SetupMessages
from blog_e2e.pages.admin_dashboard_page import AdminDashboardPage
from blog_e2e.pages.admin_login_page import AdminLoginPage
from blog_e2e.session_state import (
    SessionState,
    storage_state_path,
    validate_session_state,
)

logger = logging.getLogger(__name__)

EXIT_PASS = 0
EXIT_AUTH_FAILED = 1
EXIT_SCRIPT_ERROR = 2

# Failures inside login and capture that abort the pipeline.
STEP_ERRORS = (PlaywrightError, AssertionError, ActionError)


class AuthStatePipeline:
    """
    Produce a validated session state file for one role.

    Attributes:
        browser: Browser used for the login context and the validation check.
        config: Suite configuration (URLs, routes, credentials, directories).
        role: Role whose credentials and state file are used.
        state_path: Where the state file is written.
    """

    def __init__(
        self,
        browser: Browser,
        config: Config,
        role: Role = Role.ADMIN,
        run_logger: logging.Logger | None = None,
    ):
        self.browser = browser
        self.config = config
        self.role = role
        self.logger = resolve(run_logger, logger)
        self.state_path = storage_state_path(config.auth_dir, role)

    @property
    def credentials(self) -> Credentials:
        if self.role is Role.ADMIN:
            return self.config.admin_credentials
        return self.config.test_user_credentials

    def require_credentials(self) -> Credentials:
        credentials = self.credentials
        if not credentials.is_configured:
            self.logger.warning(SetupMessages.CREDENTIALS_MISSING, self.role.value)
            raise CredentialsMissing(SetupMessages.CREDENTIALS_MISSING % self.role.value)
        return credentials

    # -------------------------------------------------------------------------
    # Step 1: directories
    # -------------------------------------------------------------------------

    def prepare_directories(self) -> None:
        """Create the auth state and screenshot directories. Safe to repeat."""
        self.logger.debug(SetupMessages.PREPARING_DIRECTORIES, self.config.auth_dir)
        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        self.config.screenshots_dir.mkdir(parents=True, exist_ok=True)

    # -------------------------------------------------------------------------
    # Step 2: login
    # -------------------------------------------------------------------------

    def login(self, page: Page) -> None:
        """
        Log in through the login form and wait for the dashboard.

        Raises:
            CredentialsMissing: If the role has no credentials configured.
            AuthSetupError: If the form cannot be used or no redirect happens.
        """
        credentials = self.require_credentials()
        login_page = AdminLoginPage(
            page,
            self.config.base_url,
            self.config.login_path,
            self.config.dashboard_path,
            logger=self.logger,
            screenshots_dir=self.config.screenshots_dir,
        )
        self.logger.info(SetupMessages.LOGGING_IN, self.role.value, self.config.login_path)
        try:
            login_page.goto_login()
            login_page.login_with(credentials, timeout=Timeouts.LOGIN)
        except STEP_ERRORS as exc:
            self._failure_screenshot(page)
            raise AuthSetupError(
                SetupErrors.LOGIN_NOT_REDIRECTED % (self.config.dashboard_path, Timeouts.LOGIN)
                + f": {exc}"
            ) from exc

    # -------------------------------------------------------------------------
    # Step 3: capture
    # -------------------------------------------------------------------------

    def capture_state(self, page: Page) -> Path:
        """
        Confirm the dashboard is ready, then write the context's storage state.

        Raises:
            AuthSetupError: If the dashboard readiness check fails; nothing
                is written in that case.
        """
        dashboard = AdminDashboardPage(
            page,
            self.config.base_url,
            self.config.dashboard_path,
            logger=self.logger,
            screenshots_dir=self.config.screenshots_dir,
        )
        try:
            dashboard.assert_page_loaded()
        except STEP_ERRORS as exc:
            self._failure_screenshot(page)
            raise AuthSetupError(str(exc)) from exc
        self.logger.info(SetupMessages.LOGIN_VERIFIED, self.role.value)

        # Readers in other workers must never see a half-written file.
        partial = self.state_path.with_name(f"{self.state_path.name}.{os.getpid()}.tmp")
        page.context.storage_state(path=str(partial))
        os.replace(partial, self.state_path)
        self.logger.info(SetupMessages.AUTH_STATE_SAVED, self.state_path)
        return self.state_path

    # -------------------------------------------------------------------------
    # Step 4: validation
    # -------------------------------------------------------------------------

    def validate_state(self) -> SessionState:
        """
        Check the written file structurally, then open the dashboard with it.

        Raises:
            AuthSetupError: If the file is invalid or the dashboard visit is redirected
                to the login route.
        """
        try:
            return validate_session_state(self.browser, self.state_path, self.config, self.logger)
        except SessionStateError as exc:
            self.logger.error(SetupMessages.AUTH_VALIDATION_FAILED, exc)
            raise AuthSetupError(str(exc)) from exc

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def run(self) -> Path:
        """
        Run all four steps in order.

        Returns:
            Path of the validated state file.

        Raises:
            CredentialsMissing: Credentials are not configured; callers skip.
            AuthSetupError: Any step failed.
        """
        self.require_credentials()
        self.prepare_directories()

        context = self.browser.new_context()
        try:
            page = context.new_page()
            self.login(page)
            self.capture_state(page)
        except AuthSetupError as exc:
            self.logger.error(SetupMessages.ADMIN_AUTH_FAILED, exc)
            raise
        finally:
            context.close()

        self.validate_state()
        return self.state_path

    def _failure_screenshot(self, page: Page) -> Path | None:
        path = self.config.results_dir / f"auth-setup-failure-{int(time.time() * 1000)}.png"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            page.screenshot(path=str(path), full_page=True)
        except PlaywrightError as exc:
            self.logger.debug(RunMessages.FAILURE_SCREENSHOT_ERROR, exc)
            return None
        self.logger.error(SetupMessages.FAILURE_SCREENSHOT, path)
        return path


def ensure_storage_state(
    browser: Browser,
    config: Config,
    role: Role = Role.ADMIN,
    run_logger: logging.Logger | None = None,
    reuse: bool = True,
    lock_timeout: float = AUTH_STATE_LOCK_TIMEOUT_SECONDS,
) -> Path | None:
    """
    Return a valid state file for ``role``, running the pipeline if needed.

    Callers are serialized on ``<state file>.lock``, so under pytest-xdist
    one worker logs in while the others wait and then reuse its file. An
    existing file that still passes validation is reused. For the test-user
    role a failed pipeline only logs a warning and returns None.

    Raises:
        CredentialsMissing: Credentials for ``role`` are not configured.
        AuthSetupError: The admin pipeline failed, or the lock was not
            acquired within ``lock_timeout`` seconds.
    """
    log = resolve(run_logger, logger)
    pipeline = AuthStatePipeline(browser, config, role, log)
    pipeline.state_path.parent.mkdir(parents=True, exist_ok=True)
    lock_path = pipeline.state_path.with_name(f"{pipeline.state_path.name}.lock")

    log.debug(SetupMessages.WAITING_FOR_LOCK, lock_path)
    try:
        with FileLock(str(lock_path), timeout=lock_timeout):
            return _reuse_or_run(pipeline, browser, config, role, log, reuse)
    except LockTimeout as exc:
        raise AuthSetupError(SetupErrors.STATE_LOCK_TIMEOUT % (lock_timeout, lock_path)) from exc


def _reuse_or_run(
    pipeline: AuthStatePipeline,
    browser: Browser,
    config: Config,
    role: Role,
    log: logging.Logger,
    reuse: bool,
) -> Path | None:
    if reuse and pipeline.state_path.is_file():
        try:
            validate_session_state(browser, pipeline.state_path, config, log)
        except SessionStateError as exc:
            log.info(SetupMessages.AUTH_VALIDATION_FAILED, exc)
        else:
            log.info(SetupMessages.STATE_REUSED, pipeline.state_path)
            return pipeline.state_path

    try:
        return pipeline.run()
    except AuthSetupError as exc:
        if role is Role.TEST_USER:
            log.warning(SetupMessages.TEST_USER_FAILED, exc)
            return None
        raise


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for the auth setup phase."""
    parser = argparse.ArgumentParser(
        description="Log in once and persist the browser session for authenticated tests."
    )
    parser.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.ADMIN.value,
        help="Role to authenticate as",
    )
    parser.add_argument(
        "--target",
        default=None,
        help="Target environment (local, prod); defaults to $TARGET",
    )
    parser.add_argument(
        "--no-reuse",
        action="store_true",
        help="Always log in again, even if a valid state file exists",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """
    Entry point: run the pipeline for one role.

    Returns:
        ``EXIT_PASS`` (0), ``EXIT_AUTH_FAILED`` (1) or ``EXIT_SCRIPT_ERROR`` (2).
    """
    args = parse_args(argv)
    config = get_config(args.target)
    run_logger = create_run_logger(
        "auth-setup",
        level=config.log_level,
        log_file=config.results_dir / "auth-setup.log",
    )
    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=config.headless)
            try:
                ensure_storage_state(
                    browser, config, Role(args.role), run_logger, reuse=not args.no_reuse
                )
            finally:
                browser.close()
        return EXIT_PASS
    except CredentialsMissing:
        return EXIT_PASS
    except AuthSetupError:
        return EXIT_AUTH_FAILED
    except Exception as exc:  # pragma: no cover - CLI guard
        print(f"Auth setup failed: {exc}", file=sys.stderr)
        return EXIT_SCRIPT_ERROR
    finally:
        close_run_logger(run_logger)


if __name__ == "__main__":
    raise SystemExit(main())
