"""
Persisted browser session state.

A session state file is what ``BrowserContext.storage_state(path=...)``
writes: ``{"cookies": [...], "origins": [{"origin", "localStorage"}]}``. It is
written once by the auth setup and read by every authenticated fixture, so
it is checked structurally and then by probing a protected route before it
is trusted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from playwright.sync_api import Browser

from blog_e2e.config import Config
from blog_e2e.constants import Role, Timeouts
from blog_e2e.errors import SessionStateError
from blog_e2e.log import resolve
from blog_e2e.messages import SetupErrors, SetupMessages

logger = logging.getLogger(__name__)


def storage_state_path(auth_dir: Path, role: Role) -> Path:
    """Well-known location of the session state file for ``role``."""
    return Path(auth_dir) / role.state_filename


@dataclass
class SessionState:
    cookies: list[dict[str, Any]] = field(default_factory=list)
    origins: list[dict[str, Any]] = field(default_factory=list)
    path: Path | None = None

    @classmethod
    def from_dict(cls, data: Any, path: Path | None = None) -> SessionState:
        if not isinstance(data, dict):
            raise SessionStateError(SetupErrors.AUTH_FILE_INVALID_FORMAT % (path or "<memory>"))
        return cls(
            cookies=list(data.get("cookies") or []),
            origins=list(data.get("origins") or []),
            path=path,
        )

    @classmethod
    def load(cls, path: Path) -> SessionState:
        """
        Read a session state file.

        Raises:
            SessionStateError: If the file is missing or not a JSON object.
        """
        path = Path(path)
        if not path.is_file():
            raise SessionStateError(SetupErrors.AUTH_FILE_NOT_FOUND % path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SessionStateError(SetupErrors.AUTH_FILE_UNREADABLE % (path, exc)) from exc
        return cls.from_dict(data, path)

    def validate_structure(self) -> SessionState:
        """
        Require non-empty ``cookies`` and ``origins``.

        Raises:
            SessionStateError: If either list is empty.
        """
        if not self.cookies or not self.origins:
            raise SessionStateError(
                SetupErrors.AUTH_FILE_INVALID_FORMAT % (self.path or "<memory>")
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        return {"cookies": self.cookies, "origins": self.origins}


def is_redirected_to_login(url: str, login_path: str) -> bool:
    """True when ``url`` points at the login route."""
    return login_path.rstrip("/") in urlparse(url).path


def visit_protected_route(
    browser: Browser,
    state_path: Path,
    config: Config,
    timeout: int = Timeouts.NAVIGATION,
) -> str:
    """
    Open the dashboard in a fresh context seeded from ``state_path``.

    Returns:
        The URL the page ended up on after any redirects.
    """
    context = browser.new_context(storage_state=str(state_path))
    try:
        page = context.new_page()
        page.goto(config.url(config.dashboard_path), timeout=timeout)
        return page.url
    finally:
        context.close()


def validate_session_state(
    browser: Browser,
    state_path: Path,
    config: Config,
    run_logger: logging.Logger | None = None,
) -> SessionState:
    """
    Structural check, then protected-route check.

    No browser context is opened for a structurally invalid file.

    Raises:
        SessionStateError: If the file is invalid or the protected route redirects to login.
    """
    log = resolve(run_logger, logger)
    log.info(SetupMessages.VALIDATING_STATE, state_path, config.dashboard_path)
    state = SessionState.load(state_path).validate_structure()

    final_url = visit_protected_route(browser, state_path, config)
    if is_redirected_to_login(final_url, config.login_path):
        raise SessionStateError(SetupErrors.AUTH_STATE_INVALID % final_url)

    log.info(SetupMessages.STATE_VALID, state_path)
    return state
