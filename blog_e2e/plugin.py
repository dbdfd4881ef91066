"""
pytest integration for the blog suite.

Loaded from ``tests/conftest.py`` via ``pytest_plugins``. It provides:

- session fixtures for the run id, configuration, run logger and the admin
  session state (written or reused through :mod:`blog_e2e.auth_setup`)
- ``suite_scope``: opens the fixture universe named by the test's
  ``universe`` marker and hands out page objects and clients from it
- production safety for ``destructive`` tests
- a screenshot of every open page when a test fails
- a JSON run summary when the session ends, plus opt-in removal of the
  temp and downloads directories (``CLEANUP_TEMP_FILES=true``)

pytest-playwright supplies ``browser``; its ``page`` and ``context``
fixtures are not used by suite tests.
"""

from __future__ import annotations

import json
import logging
import re
import shutil
import time
import uuid
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest
from playwright.sync_api import Error as PlaywrightError

from blog_e2e.auth_setup import ensure_storage_state
from blog_e2e.config import Config, get_config
from blog_e2e.constants import Role
from blog_e2e.errors import CredentialsMissing, ProductionSafetyError
from blog_e2e.fixture_graph import FixtureScope
from blog_e2e.live_stack import require_live_app
from blog_e2e.log import close_run_logger, create_run_logger
from blog_e2e.messages import RunMessages, SafetyMessages
from blog_e2e.universes import DEFAULT_UNIVERSE, universe_for

logger = logging.getLogger(__name__)

SCOPE_KEY = pytest.StashKey[FixtureScope]()
SCREENSHOT_PAGES = ("page", "guest_page")
SUMMARY_FILENAME = "test-run-summary.json"

MARKERS = (
    "universe(name): fixture universe for the test (authenticated, guest, api)",
    "unit: fast tests with no browser or network",
    "e2e: browser tests against a running app",
    "api: HTTP tests against a running backend",
    "smoke: critical-path checks against a running app",
    "destructive: creates, changes or deletes data; skipped on production",
)


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--suite-target",
        action="store",
        default=None,
        help="Target environment (local, prod); defaults to $TARGET",
    )


def pytest_configure(config: pytest.Config) -> None:
    for marker in MARKERS:
        config.addinivalue_line("markers", marker)


def _suite_config(pytest_config: pytest.Config) -> Config:
    return get_config(pytest_config.getoption("--suite-target"))


# =============================================================================
# Production safety
# =============================================================================


def assert_not_production(operation: str, config: Config | None = None) -> None:
    """
    Refuse a destructive operation on production.

    Raises:
        ProductionSafetyError: The target is production.
    """
    config = config or get_config()
    if config.is_production:
        raise ProductionSafetyError(SafetyMessages.BLOCKED_OPERATION % operation)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if not _suite_config(config).is_production:
        return
    skip_destructive = pytest.mark.skip(reason=SafetyMessages.SKIPPED_ON_PROD)
    for item in items:
        if "destructive" in item.keywords:
            item.add_marker(skip_destructive)


# =============================================================================
# Session fixtures
# =============================================================================


@pytest.fixture(scope="session")
def run_id() -> str:
    """Unique id for the current run."""
    return uuid.uuid4().hex[:8]


@pytest.fixture(scope="session")
def suite_config(pytestconfig: pytest.Config) -> Config:
    return _suite_config(pytestconfig)


@pytest.fixture(scope="session")
def run_logger(run_id: str, suite_config: Config) -> Generator[logging.Logger, None, None]:
    """Per-run logger with a debug log file under the results directory."""
    handle = create_run_logger(
        run_id,
        level=suite_config.log_level,
        log_file=suite_config.results_dir / f"run-{run_id}.log",
    )
    yield handle
    close_run_logger(handle)


@pytest.fixture(scope="session")
def admin_storage_state(browser, suite_config: Config, run_logger: logging.Logger) -> Path:
    """
    Path of a validated admin session state.

    Skips when admin credentials are not configured; errors when the
    authentication pipeline fails.
    """
    require_live_app(suite_config)
    try:
        return ensure_storage_state(browser, suite_config, Role.ADMIN, run_logger)
    except CredentialsMissing as exc:
        pytest.skip(str(exc))


# =============================================================================
# Per-test universe
# =============================================================================


@pytest.fixture
def suite_scope(
    request: pytest.FixtureRequest, suite_config: Config, run_logger: logging.Logger
) -> Generator[FixtureScope, None, None]:
    """
    Fixture scope of the universe named by the nearest ``universe`` marker.

    Externals are pulled from pytest only when the universe declares them,
    so API tests never start a browser.
    """
    marker = request.node.get_closest_marker("universe")
    graph = universe_for(marker.args[0] if marker else DEFAULT_UNIVERSE)
    require_live_app(suite_config)

    providers = {
        "config": lambda: suite_config,
        "run_logger": lambda: run_logger,
        "browser": lambda: request.getfixturevalue("browser"),
        "admin_storage_state": lambda: request.getfixturevalue("admin_storage_state"),
    }
    externals = {name: providers[name]() for name in sorted(graph.externals)}

    with graph.open(run_logger=run_logger, **externals) as scope:
        request.node.stash[SCOPE_KEY] = scope
        yield scope


@pytest.fixture
def home_page(suite_scope: FixtureScope):
    return suite_scope.get("home_page")


@pytest.fixture
def blog_page(suite_scope: FixtureScope):
    return suite_scope.get("blog_page")


@pytest.fixture
def admin_login_page(suite_scope: FixtureScope):
    return suite_scope.get("admin_login_page")


@pytest.fixture
def admin_dashboard_page(suite_scope: FixtureScope):
    return suite_scope.get("admin_dashboard_page")


@pytest.fixture
def blog_editor_page(suite_scope: FixtureScope):
    return suite_scope.get("blog_editor_page")


@pytest.fixture
def workflows(suite_scope: FixtureScope):
    return suite_scope.get("workflows")


@pytest.fixture
def admin_page(suite_scope: FixtureScope):
    return suite_scope.get("admin_page")


@pytest.fixture
def guest_page(suite_scope: FixtureScope):
    return suite_scope.get("guest_page")


@pytest.fixture
def api(suite_scope: FixtureScope):
    return suite_scope.get("api")


@pytest.fixture
def api_client(suite_scope: FixtureScope):
    return suite_scope.get("api_client")


@pytest.fixture
def test_data(suite_scope: FixtureScope):
    return suite_scope.get("test_data")


@pytest.fixture
def blog_cleanup(suite_scope: FixtureScope):
    return suite_scope.get("blog_cleanup")


# =============================================================================
# Reporting hooks
# =============================================================================


def _screenshot_name(nodeid: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", nodeid).strip("_")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo):
    outcome = yield
    report = outcome.get_result()
    if report.when != "call" or not report.failed:
        return

    scope = item.stash.get(SCOPE_KEY, None)
    if scope is None:
        return

    screenshots_dir = scope.get("config").screenshots_dir
    for name in SCREENSHOT_PAGES:
        if name not in scope:
            continue
        path = screenshots_dir / (
            f"failure-{_screenshot_name(item.nodeid)}-{name}-{int(time.time() * 1000)}.png"
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            scope.get(name).screenshot(path=str(path), full_page=True)
        except PlaywrightError as exc:
            scope.logger.debug(RunMessages.FAILURE_SCREENSHOT_ERROR, exc)
            continue
        scope.logger.info(RunMessages.FAILURE_SCREENSHOT, path)
        report.sections.append(("screenshot", str(path)))


def build_run_summary(config: Config, exit_status: int) -> dict:
    """Metadata about the finished run, written next to the results."""
    auth_files = sorted(p.name for p in config.auth_dir.glob("*.json")) if config.auth_dir.is_dir() else []
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "target": config.target,
        "ci": config.is_ci,
        "base_url": config.base_url,
        "exit_status": int(exit_status),
        "auth_files_preserved": auth_files,
        "results_dir": str(config.results_dir),
    }


def cleanup_temp_dirs(config: Config) -> list[Path]:
    """Remove the scratch directories under the results dir; returns those removed."""
    removed = []
    for directory in config.temp_dirs:
        if not directory.exists():
            continue
        try:
            shutil.rmtree(directory)
        except OSError as exc:
            logger.warning(RunMessages.TEMP_DIR_CLEANUP_FAILED, directory, exc)
            continue
        logger.info(RunMessages.TEMP_DIR_REMOVED, directory)
        removed.append(directory)
    return removed


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    # Only the controller writes the summary under pytest-xdist.
    if hasattr(session.config, "workerinput"):
        return
    config = _suite_config(session.config)
    if config.cleanup_temp_files:
        cleanup_temp_dirs(config)
    path = config.results_dir / SUMMARY_FILENAME
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(build_run_summary(config, exitstatus), indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning(RunMessages.SUMMARY_FAILED, exc)
        return
    logger.info(RunMessages.SUMMARY_WRITTEN, path)
