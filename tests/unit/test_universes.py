"""
Unit tests for the authenticated, guest and API fixture universes.

The browser is a MagicMock; ``ApiClient`` is patched so no HTTP is sent.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from blog_e2e import universes
from blog_e2e.config import get_config
from blog_e2e.errors import AuthSetupError, UnknownFixtureError
from blog_e2e.pages import AdminDashboardPage, AdminLoginPage, HomePage
from blog_e2e.universes import API, AUTHENTICATED, GUEST, universe_for


pytestmark = pytest.mark.unit


@pytest.fixture
def config(clean_env):
    clean_env.setenv("ADMIN_EMAIL", "editor@blog.test")
    clean_env.setenv("ADMIN_PASSWORD", "correct-horse")
    return get_config("local")


@pytest.fixture
def browser():
    return MagicMock(name="browser")


@pytest.fixture
def api_client_cls():
    with patch.object(universes, "ApiClient") as cls:
        yield cls


class TestUniverseSelection:
    """Tests for universe_for and the bindings each universe offers."""

    def test_known_universes(self):
        assert universe_for(AUTHENTICATED).frozen
        assert universe_for(GUEST).frozen
        assert universe_for(API).frozen

    def test_unknown_universe_raises(self):
        with pytest.raises(UnknownFixtureError, match="staff"):
            universe_for("staff")

    def test_bindings_per_universe(self):
        """Test that admin fixtures exist only where a session is available."""
        authenticated = universe_for(AUTHENTICATED)
        guest = universe_for(GUEST)
        api = universe_for(API)

        assert "admin_dashboard_page" in authenticated
        assert "admin_dashboard_page" not in guest
        assert "workflows" in authenticated and "workflows" not in guest
        assert "home_page" in guest and "home_page" in authenticated
        assert "page" not in api
        assert "admin_storage_state" in authenticated.externals
        assert "browser" not in api.externals


class TestGuestUniverse:
    """Tests for the guest universe."""

    def test_context_has_no_storage_state(self, browser, config, quiet_logger):
        """Test that guest pages start from a fresh context and are closed after."""
        # Arrange
        graph = universe_for(GUEST)

        # Act
        with graph.open(browser=browser, config=config, run_logger=quiet_logger) as scope:
            home = scope.get("home_page")
            login = scope.get("admin_login_page")

        # Assert
        assert isinstance(home, HomePage)
        assert isinstance(login, AdminLoginPage)
        assert login.page is home.page
        assert "storage_state" not in browser.new_context.call_args.kwargs
        context = browser.new_context.return_value
        context.new_page.return_value.close.assert_called_once()
        context.close.assert_called_once()

    def test_api_client_is_anonymous(self, browser, config, quiet_logger, api_client_cls):
        graph = universe_for(GUEST)

        with graph.open(browser=browser, config=config, run_logger=quiet_logger) as scope:
            scope.get("api_client")

        api_client_cls.return_value.login_as_admin.assert_not_called()


class TestAuthenticatedUniverse:
    """Tests for the authenticated universe."""

    def _open(self, browser, config, logger):
        return universe_for(AUTHENTICATED).open(
            browser=browser,
            config=config,
            run_logger=logger,
            admin_storage_state=Path("e2e/.auth/admin.json"),
        )

    def test_dashboard_uses_stored_session(self, browser, config, quiet_logger):
        """Test that admin pages run in a context seeded from the state file."""
        # Arrange
        page = browser.new_context.return_value.new_page.return_value
        page.url = config.url(config.dashboard_path)

        # Act
        with self._open(browser, config, quiet_logger) as scope:
            dashboard = scope.get("admin_dashboard_page")

        # Assert
        assert isinstance(dashboard, AdminDashboardPage)
        assert browser.new_context.call_args.kwargs["storage_state"] == "e2e/.auth/admin.json"
        page.goto.assert_called_once_with(config.url(config.dashboard_path))

    def test_workflows_share_the_admin_page(self, browser, config, quiet_logger):
        page = browser.new_context.return_value.new_page.return_value
        page.url = config.url(config.dashboard_path)

        with self._open(browser, config, quiet_logger) as scope:
            workflows = scope.get("workflows")
            dashboard = scope.get("admin_dashboard_page")

        assert workflows.admin_dashboard.dashboard.page is dashboard.page
        assert browser.new_context.call_count == 1

    def test_admin_page_redirected_to_login_fails(self, browser, config, quiet_logger):
        """Test that an expired session surfaces as a setup error."""
        # Arrange
        page = browser.new_context.return_value.new_page.return_value
        page.url = config.url(config.login_path)

        # Act
        with pytest.raises(AuthSetupError):
            with self._open(browser, config, quiet_logger) as scope:
                scope.get("admin_page")

        # Assert
        browser.new_context.return_value.close.assert_called_once()

    def test_login_page_uses_separate_guest_context(self, browser, config, quiet_logger):
        """Test that the login form is opened outside the authenticated context."""
        # Arrange
        admin_context = MagicMock(name="admin_context")
        guest_context = MagicMock(name="guest_context")
        browser.new_context.side_effect = [admin_context, guest_context]

        # Act
        with self._open(browser, config, quiet_logger) as scope:
            scope.get("home_page")
            login = scope.get("admin_login_page")

        # Assert
        assert login.page is guest_context.new_page.return_value
        assert "storage_state" not in browser.new_context.call_args_list[1].kwargs
        guest_context.close.assert_called_once()
        admin_context.close.assert_called_once()

    def test_api_handshake_failure_only_warns(
        self, browser, config, quiet_logger, api_client_cls
    ):
        """Test that a failed admin API login does not fail the fixture."""
        # Arrange
        client = api_client_cls.return_value
        client.login_as_admin.return_value = None
        client.is_authenticated = False

        # Act
        with self._open(browser, config, quiet_logger) as scope:
            result = scope.get("api_client")

        # Assert
        assert result is client
        quiet_logger.warning.assert_called_once()
        client.logout.assert_not_called()

    def test_api_client_logs_out_on_teardown(
        self, browser, config, quiet_logger, api_client_cls
    ):
        client = api_client_cls.return_value
        client.login_as_admin.return_value = {"token": "jwt"}
        client.is_authenticated = True
        client.logout.return_value = False

        with self._open(browser, config, quiet_logger) as scope:
            scope.get("api_client")

        client.logout.assert_called_once()
        quiet_logger.warning.assert_not_called()
