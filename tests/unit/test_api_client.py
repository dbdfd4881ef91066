"""
Unit tests for the blog API client.

The requests session is a MagicMock; responses are MagicMocks carrying
``ok``, ``status_code`` and a ``json()`` body.

Key Concepts Demonstrated:
- Mocking HTTP requests
- Mocking side effects (exceptions)
- Verifying mock calls
"""

from unittest.mock import MagicMock

import pytest
import requests

from blog_e2e.api_client import (
    ApiClient,
    RateLimitResult,
    TimedResult,
    build_api_session,
    detect_rate_limit,
    measure_response_time,
    responds_with_status,
)
from blog_e2e.config import get_config
from blog_e2e.constants import API_DEFAULT_HEADERS


pytestmark = pytest.mark.unit


def _response(status=200, body=None, reason="OK"):
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body if body is not None else {}
    return response


@pytest.fixture
def config(clean_env):
    clean_env.setenv("TEST_BASE_URL", "http://blog.test")
    clean_env.setenv("ADMIN_EMAIL", "editor@blog.test")
    clean_env.setenv("ADMIN_PASSWORD", "correct-horse")
    return get_config("local")


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session, config, quiet_logger):
    return ApiClient(session, config, run_logger=quiet_logger)


class TestSession:
    def test_default_headers(self):
        session = build_api_session()

        for name, value in API_DEFAULT_HEADERS.items():
            assert session.headers[name] == value


class TestAuthentication:
    """Tests for login and logout."""

    def test_login_stores_token_and_sends_bearer(self, client, session):
        """Test that the token from login is attached to later requests."""
        # Arrange
        session.request.side_effect = [
            _response(body={"success": True, "data": {"token": "jwt-1", "user": {"id": "u1"}}}),
            _response(body={"success": True, "data": {"user": {"id": "u1"}}}),
        ]

        # Act
        result = client.login_as_admin()
        user = client.get_current_user()

        # Assert
        assert result == {"token": "jwt-1", "user": {"id": "u1"}}
        assert client.is_authenticated
        assert user == {"id": "u1"}
        login_call, profile_call = session.request.call_args_list
        assert login_call.args == ("POST", "http://blog.test/api/auth/login")
        assert login_call.kwargs["json"] == {
            "email": "editor@blog.test",
            "password": "correct-horse",
        }
        assert profile_call.kwargs["headers"]["Authorization"] == "Bearer jwt-1"

    def test_failed_login_returns_none(self, client, session, quiet_logger):
        """Test that a rejected login logs the API error and keeps no token."""
        # Arrange
        session.request.return_value = _response(
            401, {"success": False, "error": "Invalid credentials"}, "Unauthorized"
        )

        # Act
        result = client.login("editor@blog.test", "wrong")

        # Assert
        assert result is None
        assert not client.is_authenticated
        assert "Invalid credentials" in quiet_logger.error.call_args.args

    def test_network_error_returns_none(self, client, session, quiet_logger):
        """Test that connection failures are logged instead of raised."""
        # Arrange
        session.request.side_effect = requests.ConnectionError("refused")

        # Act
        result = client.login("editor@blog.test", "pw")

        # Assert
        assert result is None
        quiet_logger.error.assert_called_once()

    def test_logout_clears_token(self, client, session):
        client.token = "jwt-1"
        session.request.return_value = _response(body={"success": True})

        assert client.logout() is True
        assert client.token is None


class TestBlogPosts:
    """Tests for blog endpoints."""

    def test_create_fills_defaults(self, client, session):
        """Test that a minimal post is sent as a visible draft with SEO fields."""
        # Arrange
        session.request.return_value = _response(
            201, {"success": True, "data": {"post": {"id": "p1", "title": "Hello"}}}
        )

        # Act
        created = client.create_blog_post({"title": "Hello", "content": "Body"})

        # Assert
        assert created == {"id": "p1", "title": "Hello"}
        payload = session.request.call_args.kwargs["json"]
        assert payload["status"] == "draft"
        assert payload["hide_link"] is False
        assert payload["seo_meta"] == {"title": "", "description": "", "keywords": ""}

    def test_list_unwraps_nested_data(self, client, session):
        """Test that the nested posts list, total and pagination are returned."""
        # Arrange
        session.request.return_value = _response(
            body={
                "success": True,
                "data": {
                    "data": [{"id": "p1"}],
                    "total": 1,
                    "pagination": {"page": 1, "limit": 10, "total": 1, "pages": 1},
                },
            }
        )

        # Act
        result = client.get_blog_posts(status="all", limit=10, search="e2e")

        # Assert
        assert result["posts"] == [{"id": "p1"}]
        assert result["total"] == 1
        assert session.request.call_args.kwargs["params"] == {"limit": 10, "search": "e2e"}

    def test_search_only_published(self, client, session):
        session.request.return_value = _response(body={"success": True, "data": {"data": []}})

        result = client.search_blog_posts("python")

        assert result == {"posts": [], "total": 0}
        assert session.request.call_args.kwargs["params"]["status"] == "published"

    def test_unpin_uses_delete(self, client, session):
        session.request.return_value = _response(200, {"success": True})

        assert client.unpin_blog_post("p1") is True
        assert session.request.call_args.args == ("DELETE", "http://blog.test/api/blog/p1/pin")

    def test_delete_failure_returns_false(self, client, session, quiet_logger):
        session.request.return_value = _response(404, {"success": False, "error": "Not found"})

        assert client.delete_blog_post("missing") is False
        quiet_logger.error.assert_called_once()


class TestHealth:
    """Tests for the health check."""

    def test_healthy_backend(self, client, session, config):
        """Test that status OK with a timestamp is healthy."""
        # Arrange
        session.request.return_value = _response(
            body={"status": "OK", "timestamp": "2026-01-01T00:00:00Z"}
        )

        # Act
        healthy = client.check_health()

        # Assert
        assert healthy is True
        assert session.request.call_args.args == ("GET", config.health_url)

    @pytest.mark.parametrize(
        "response",
        [
            _response(503, {"status": "DOWN"}),
            _response(200, {"status": "OK"}),
            _response(200, ValueError("not json")),
        ],
    )
    def test_unhealthy_backend(self, client, session, response):
        session.request.return_value = response

        assert client.check_health() is False


class TestShapeValidation:
    """Tests for response shape validators."""

    def test_blog_post_structure(self):
        post = {
            "id": "p1",
            "title": "t",
            "content": "c",
            "status": "draft",
            "created_at": "x",
            "updated_at": "y",
            "seo_meta": {"title": "", "description": "", "keywords": ""},
        }

        ApiClient.validate_blog_post_structure(post)
        with pytest.raises(AssertionError, match="seo_meta"):
            ApiClient.validate_blog_post_structure({**post, "seo_meta": {"title": ""}})

    def test_envelopes(self):
        ApiClient.validate_success_response({"success": True, "data": {}})
        ApiClient.validate_error_response({"success": False, "error": "nope"})
        with pytest.raises(AssertionError):
            ApiClient.validate_success_response({"success": False, "error": "nope"})


class TestApiTestHelpers:
    """Tests for rate-limit, latency and error-status helpers."""

    def test_rate_limit_detected(self, client, session, quiet_logger):
        """Test that the first 429 stops the burst and reports the successful count."""
        # Arrange
        session.request.side_effect = [_response(200), _response(200), _response(429)]

        # Act
        result = detect_rate_limit(client, "/blog", max_requests=10)

        # Assert
        assert result == RateLimitResult(rate_limited=True, requests_before_limit=2)
        assert session.request.call_count == 3
        quiet_logger.info.assert_called_once()

    def test_no_rate_limit_within_budget(self, client, session):
        session.request.return_value = _response(200)

        result = detect_rate_limit(client, "/blog", max_requests=5)

        assert result == RateLimitResult(rate_limited=False, requests_before_limit=5)

    def test_rate_limit_burst_stops_when_window_closes(self, client, session):
        """Test that the time window bounds the burst."""
        # Arrange
        session.request.return_value = _response(200)
        clock = MagicMock(side_effect=[0.0, 0.5, 1.5])

        # Act
        result = detect_rate_limit(client, "/blog", window_seconds=1.0, clock=clock)

        # Assert
        assert result.requests_before_limit == 1
        assert not result.rate_limited

    def test_measure_response_time_success(self):
        clock = MagicMock(side_effect=[1.0, 1.2])

        result = measure_response_time(lambda: {"posts": []}, clock=clock)

        assert result == TimedResult(response_time_ms=200, success=True, value={"posts": []})

    @pytest.mark.parametrize("outcome", [None, False, requests.ConnectionError("refused")])
    def test_measure_response_time_failure(self, outcome, quiet_logger):
        """Test that a None/False result or a request error counts as a failure."""
        # Arrange
        def operation():
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        # Act
        result = measure_response_time(
            operation, clock=MagicMock(side_effect=[0.0, 0.05]), run_logger=quiet_logger
        )

        # Assert
        assert result.success is False
        assert result.response_time_ms == 50
        quiet_logger.error.assert_called_once()

    def test_error_status_matches(self, client, session):
        session.request.return_value = _response(404, reason="Not Found")

        assert responds_with_status(client, "/blog/missing", 404)
        assert not responds_with_status(client, "/blog/missing", 400)

    def test_error_status_on_network_failure(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")

        assert not responds_with_status(client, "/blog/missing", 404)
