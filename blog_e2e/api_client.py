"""
HTTP client for the blog API.

Wraps a :class:`requests.Session` with the API's endpoints and its response
envelopes (``{"success": true, "data": ...}`` on success,
``{"success": false, "error": ...}`` on failure). Methods return ``None`` or
``False`` when a call fails and log why, so tests decide what a failure
means; shape validators raise ``AssertionError``.

Key Concepts Demonstrated:
- Session reuse with default headers and a per-request timeout
- Bearer token handling after login
- Envelope and payload shape validation
- Rate-limit, latency and error-status checks for API tests
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import requests

from blog_e2e.config import Config
from blog_e2e.constants import (
    API_DEFAULT_HEADERS,
    API_TIMEOUT_SECONDS,
    BLOG_POST_FIELDS,
    HEALTH_EXPECTED_STATUS,
    HEALTH_REQUIRED_FIELDS,
    PAGINATION_FIELDS,
    SEO_META_FIELDS,
    USER_FIELDS,
    BlogStatus,
)
from blog_e2e.log import resolve
from blog_e2e.messages import ApiMessages

logger = logging.getLogger(__name__)


def build_api_session() -> requests.Session:
    """Create a session carrying the API's default headers."""
    session = requests.Session()
    session.headers.update(API_DEFAULT_HEADERS)
    return session


def _error_text(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason or str(response.status_code)
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason or str(response.status_code)


def _json(response: requests.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _data(response: requests.Response) -> Any:
    return _json(response).get("data")


class ApiClient:
    """
    Client for the blog REST API.

    Attributes:
        session: Underlying requests session.
        config: Suite configuration (API base URL, health URL, credentials).
        token: Bearer token after a successful login.
    """

    def __init__(
        self,
        session: requests.Session,
        config: Config,
        run_logger: logging.Logger | None = None,
        timeout: float = API_TIMEOUT_SECONDS,
    ):
        self.session = session
        self.config = config
        self.logger = resolve(run_logger, logger)
        self.timeout = timeout
        self.token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response | None:
        """
        Send a request to the API, attaching auth headers and the timeout.

        Returns:
            The response, or None when the request could not be sent.
        """
        url = path if path.startswith(("http://", "https://")) else self.config.api(path)
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        try:
            return self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            self.logger.error(ApiMessages.REQUEST_ERROR, method, url, exc)
            return None

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def login(self, email: str, password: str) -> dict[str, Any] | None:
        """
        Log in and keep the returned bearer token.

        Returns:
            ``{"token": ..., "user": ...}`` on success, else None.
        """
        response = self._request("POST", "/auth/login", json={"email": email, "password": password})
        if response is None:
            return None
        body = _json(response)
        if response.ok and body.get("success"):
            data = body.get("data") or {}
            self.token = data.get("token")
            self.logger.info(ApiMessages.LOGIN_SUCCESS, email)
            return {"token": self.token, "user": data.get("user")}
        self.logger.error(ApiMessages.LOGIN_FAILED, _error_text(response))
        return None

    def login_as_admin(self) -> dict[str, Any] | None:
        credentials = self.config.admin_credentials
        return self.login(credentials.email, credentials.password)

    def logout(self) -> bool:
        response = self._request("POST", "/auth/logout")
        if response is not None and response.ok:
            self.token = None
            return True
        if response is not None:
            self.logger.error(ApiMessages.LOGOUT_FAILED, _error_text(response))
        return False

    def get_current_user(self) -> dict[str, Any] | None:
        response = self._request("GET", "/auth/profile")
        if response is None or not response.ok:
            return None
        data = _data(response) or {}
        return data.get("user", data) or None

    def create_user(
        self, name: str, email: str, password: str, role: str = "user"
    ) -> dict[str, Any] | None:
        response = self._request(
            "POST",
            "/admin/users",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        if response is None:
            return None
        if response.ok:
            data = _data(response) or {}
            return data.get("user", data)
        self.logger.error(ApiMessages.USER_CREATION_FAILED, _error_text(response))
        return None

    # -------------------------------------------------------------------------
    # Blog posts
    # -------------------------------------------------------------------------

    def create_blog_post(self, post: dict[str, Any]) -> dict[str, Any] | None:
        """
        Create a blog post. Missing fields default to a visible draft with
        empty SEO metadata.
        """
        payload = {
            "status": BlogStatus.DRAFT.value,
            "hide_link": False,
            **post,
            "seo_meta": {
                "title": "",
                "description": "",
                "keywords": "",
                **(post.get("seo_meta") or {}),
            },
        }
        response = self._request("POST", "/blog", json=payload)
        if response is None:
            return None
        if response.ok:
            created = (_data(response) or {}).get("post")
            if created:
                self.logger.debug(ApiMessages.BLOG_POST_CREATED, created.get("id"))
            return created
        self.logger.error(ApiMessages.BLOG_POST_CREATION_FAILED, _error_text(response))
        return None

    def get_blog_post(self, post_id: str) -> dict[str, Any] | None:
        response = self._request("GET", f"/blog/{post_id}")
        if response is None or not response.ok:
            return None
        return (_data(response) or {}).get("post")

    def get_blog_posts(
        self,
        status: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        search: str | None = None,
    ) -> dict[str, Any] | None:
        """
        List blog posts.

        Args:
            status: ``draft``, ``published`` or ``all``/None for every post.
            limit: Page size.
            offset: Number of posts to skip.
            search: Full-text search term.

        Returns:
            ``{"posts": [...], "total": int, "pagination": {...}}`` or None.
        """
        params: dict[str, Any] = {}
        if status and status != "all":
            params["status"] = status
        if limit:
            params["limit"] = limit
        if offset:
            params["offset"] = offset
        if search:
            params["search"] = search

        response = self._request("GET", "/blog", params=params)
        if response is None or not response.ok:
            return None
        data = _data(response) or {}
        return {
            "posts": data.get("data") or [],
            "total": data.get("total") or 0,
            "pagination": data.get("pagination") or {},
        }

    def search_blog_posts(
        self, query: str, limit: int | None = None, offset: int | None = None
    ) -> dict[str, Any] | None:
        """Search published posts only."""
        result = self.get_blog_posts(
            status=BlogStatus.PUBLISHED.value, limit=limit, offset=offset, search=query
        )
        if result is None:
            return None
        return {"posts": result["posts"], "total": result["total"]}

    def update_blog_post(self, post_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        response = self._request("PUT", f"/blog/{post_id}", json=changes)
        if response is None:
            return None
        if response.ok:
            return (_data(response) or {}).get("post")
        self.logger.error(ApiMessages.BLOG_POST_UPDATE_FAILED, _error_text(response))
        return None

    def delete_blog_post(self, post_id: str) -> bool:
        response = self._request("DELETE", f"/blog/{post_id}")
        if response is None:
            return False
        if response.ok:
            return True
        self.logger.error(ApiMessages.BLOG_POST_DELETE_FAILED, _error_text(response))
        return False

    def pin_blog_post(self, post_id: str) -> bool:
        response = self._request("POST", f"/blog/{post_id}/pin")
        if response is None:
            return False
        if response.ok:
            return True
        self.logger.error(ApiMessages.BLOG_POST_PIN_FAILED, _error_text(response))
        return False

    def unpin_blog_post(self, post_id: str) -> bool:
        response = self._request("DELETE", f"/blog/{post_id}/pin")
        if response is None:
            return False
        if response.ok:
            return True
        self.logger.error(ApiMessages.BLOG_POST_UNPIN_FAILED, _error_text(response))
        return False

    def like_blog_post(self, post_id: str) -> bool:
        response = self._request("POST", f"/blog/{post_id}/like")
        return response is not None and response.ok

    # -------------------------------------------------------------------------
    # System
    # -------------------------------------------------------------------------

    def check_health(self) -> bool:
        """True when the backend health endpoint reports status OK with a timestamp."""
        response = self._request("GET", self.config.health_url)
        if response is None:
            return False
        if not response.ok:
            self.logger.error(ApiMessages.HEALTH_CHECK_FAILED, response.status_code)
            return False
        try:
            body = response.json()
        except ValueError as exc:
            self.logger.error(ApiMessages.HEALTH_CHECK_FAILED, exc)
            return False
        return body.get("status") == HEALTH_EXPECTED_STATUS and bool(body.get("timestamp"))

    def get_raw(self, path: str, **kwargs: Any) -> requests.Response | None:
        """GET ``path`` and return the response untouched, whatever its status."""
        return self._request("GET", path, **kwargs)

    def get_system_stats(self) -> dict[str, Any] | None:
        response = self._request("GET", "/admin/stats")
        if response is None or not response.ok:
            return None
        return _data(response)

    # -------------------------------------------------------------------------
    # Shape validation
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_success_response(body: dict[str, Any]) -> None:
        assert body.get("success") is True, f"Expected success envelope, got {body!r}"
        assert "data" in body, "Success envelope has no 'data'"

    @staticmethod
    def validate_error_response(body: dict[str, Any]) -> None:
        assert body.get("success") is False, f"Expected error envelope, got {body!r}"
        assert "error" in body, "Error envelope has no 'error'"

    @staticmethod
    def validate_blog_post_structure(post: dict[str, Any]) -> None:
        missing = [name for name in BLOG_POST_FIELDS if name not in post]
        assert not missing, f"Blog post is missing fields: {missing}"
        seo_meta = post["seo_meta"]
        if seo_meta is not None:
            missing = [name for name in SEO_META_FIELDS if name not in seo_meta]
            assert not missing, f"seo_meta is missing fields: {missing}"

    @staticmethod
    def validate_user_structure(user: dict[str, Any]) -> None:
        missing = [name for name in USER_FIELDS if name not in user]
        assert not missing, f"User is missing fields: {missing}"

    @staticmethod
    def validate_pagination_structure(pagination: dict[str, Any]) -> None:
        missing = [name for name in PAGINATION_FIELDS if name not in pagination]
        assert not missing, f"Pagination is missing fields: {missing}"

    @staticmethod
    def validate_health_structure(body: dict[str, Any]) -> None:
        missing = [name for name in HEALTH_REQUIRED_FIELDS if name not in body]
        assert not missing, f"Health response is missing fields: {missing}"


# -------------------------------------------------------------------------
# API test helpers
# -------------------------------------------------------------------------


@dataclass(frozen=True)
class RateLimitResult:
    rate_limited: bool
    requests_before_limit: int


@dataclass(frozen=True)
class TimedResult:
    """Outcome of :func:`measure_response_time`; ``value`` is None on failure."""

    response_time_ms: int
    success: bool
    value: Any = None


def detect_rate_limit(
    client: ApiClient,
    path: str,
    max_requests: int = 100,
    window_seconds: float = 60.0,
    clock: Callable[[], float] = time.monotonic,
) -> RateLimitResult:
    """
    Fire GET requests at ``path`` until the API answers 429 or a limit is hit.

    Stops at ``max_requests`` requests, after ``window_seconds``, or on the
    first request that could not be sent.

    Returns:
        Whether a 429 was seen and how many requests succeeded before it.
    """
    start = clock()
    count = 0
    while count < max_requests and clock() - start < window_seconds:
        response = client.get_raw(path)
        if response is None:
            break
        if response.status_code == 429:
            client.logger.info(ApiMessages.RATE_LIMITED, path, count)
            return RateLimitResult(True, count)
        count += 1
    return RateLimitResult(False, count)


def measure_response_time(
    operation: Callable[[], Any],
    clock: Callable[[], float] = time.monotonic,
    run_logger: logging.Logger | None = None,
) -> TimedResult:
    """
    Time one API operation.

    Client methods signal failure by returning None or False, and so does
    a raised ``requests.RequestException``; both count as unsuccessful.
    """
    log = resolve(run_logger, logger)
    start = clock()
    try:
        value = operation()
    except requests.RequestException as exc:
        elapsed = int((clock() - start) * 1000)
        log.error(ApiMessages.OPERATION_FAILED, elapsed, exc)
        return TimedResult(elapsed, False)
    elapsed = int((clock() - start) * 1000)
    if value is None or value is False:
        log.error(ApiMessages.OPERATION_FAILED, elapsed, value)
        return TimedResult(elapsed, False)
    return TimedResult(elapsed, True, value)


def responds_with_status(client: ApiClient, path: str, expected_status: int) -> bool:
    """True when GET ``path`` answers exactly ``expected_status``."""
    response = client.get_raw(path)
    if response is None:
        return False
    if response.status_code != expected_status:
        client.logger.error(ApiMessages.UNEXPECTED_STATUS, path, response.status_code, expected_status)
        return False
    return True
