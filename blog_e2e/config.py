"""
Suite configuration module.

This module defines configuration classes for the environments the suite
can target (local development stack, production). Values are read from
environment variables when a configuration is constructed, with sensible
defaults for everything except credentials.

Credentials are never hardcoded: when they are missing, tests and setup
steps that need them are skipped rather than failed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

PLACEHOLDER_ADMIN_EMAIL = "admin@example.com"


def _env_flag(name: str) -> bool:
    """Return True when an environment flag is set to a truthy value."""
    return os.environ.get(name, "").strip().lower() not in ("", "0", "false", "no")


def _env_choice(name: str) -> bool | None:
    """Like :func:`_env_flag`, but None when the variable is unset or empty."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    return _env_flag(name)


@dataclass(frozen=True)
class Credentials:
    """Email/password pair for one role."""

    email: str
    password: str

    @property
    def is_configured(self) -> bool:
        return bool(self.email and self.password) and self.email != PLACEHOLDER_ADMIN_EMAIL

    def __repr__(self) -> str:
        # Keep passwords out of logs and assertion output.
        return f"Credentials(email={self.email!r}, password='***')"


class Config:
    """Base configuration with default settings."""

    TARGET: str = "local"
    DEFAULT_BASE_URL: str = "http://localhost:3000"
    HEADLESS_DEFAULT: bool = True

    def __init__(self) -> None:
        suffix = self.TARGET.upper()

        self.target: str = self.TARGET
        self.base_url: str = (
            os.environ.get(f"TEST_BASE_URL_{suffix}")
            or os.environ.get("TEST_BASE_URL")
            or self.DEFAULT_BASE_URL
        ).rstrip("/")
        self.api_url: str = (
            os.environ.get(f"API_BASE_URL_{suffix}")
            or os.environ.get("API_BASE_URL")
            or f"{self.base_url}/api"
        ).rstrip("/")

        self.backend_port: int = int(os.environ.get("BACKEND_SERVICE_PORT", "3001"))
        self.health_path: str = os.environ.get("HEALTH_ENDPOINT_PATH", "/health")

        self.is_ci: bool = _env_flag("CI")
        self.is_docker: bool = _env_flag("DOCKER")
        self.log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()
        if self.is_ci or self.is_docker:
            self.headless: bool = True
        elif _env_flag("HEADED"):
            self.headless = False
        else:
            headless = _env_choice("HEADLESS")
            self.headless = self.HEADLESS_DEFAULT if headless is None else headless

        self.admin_credentials = Credentials(
            email=os.environ.get("ADMIN_EMAIL", ""),
            password=os.environ.get("ADMIN_PASSWORD", ""),
        )
        self.test_user_credentials = Credentials(
            email=os.environ.get("TEST_USER_EMAIL", ""),
            password=os.environ.get("TEST_USER_PASSWORD", ""),
        )

        # Protected routes come from the environment so they stay out of the repo.
        self.login_path: str = os.environ.get("PROTECTED_LOGIN_PATH", "/admin/login")
        self.dashboard_path: str = os.environ.get(
            "PROTECTED_DASHBOARD_PATH", "/admin/dashboard"
        )
        self.content_create_path: str = os.environ.get(
            "PROTECTED_CONTENT_CREATE_PATH", "/admin/blog/new"
        )

        self.auth_dir: Path = Path(os.environ.get("AUTH_STATE_DIR", "e2e/.auth"))
        self.results_dir: Path = Path(os.environ.get("TEST_RESULTS_DIR", "test-results"))
        self.cleanup_temp_files: bool = _env_flag("CLEANUP_TEMP_FILES")

    @property
    def is_production(self) -> bool:
        return self.target == "prod" or os.environ.get("TEST_ENV") == "production"

    @property
    def screenshots_dir(self) -> Path:
        return self.results_dir / "screenshots"

    @property
    def temp_dirs(self) -> tuple[Path, ...]:
        """Scratch directories removed at session end when ``CLEANUP_TEMP_FILES`` is set."""
        return (self.results_dir / "temp", self.results_dir / "downloads")

    def url(self, path: str = "") -> str:
        """Join a route onto the application base URL."""
        if not path:
            return self.base_url
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def api(self, path: str = "") -> str:
        """Join an endpoint onto the API base URL."""
        return f"{self.api_url}/{path.lstrip('/')}" if path else self.api_url

    @property
    def health_url(self) -> str:
        """
        Health endpoint of the backend service.

        Locally the backend listens on its own port (reached through
        ``host.docker.internal`` from inside a container); remote targets
        proxy the endpoint through the main domain.
        """
        if self.target == "local":
            host = "host.docker.internal" if self.is_docker else "localhost"
            return f"http://{host}:{self.backend_port}{self.health_path}"
        return f"{self.base_url}{self.health_path}"


class LocalConfig(Config):
    """Local development stack."""

    TARGET = "local"
    DEFAULT_BASE_URL = "http://localhost:3000"
    HEADLESS_DEFAULT = False


class ProductionConfig(Config):
    """Production site. Destructive tests are skipped against it."""

    TARGET = "prod"
    DEFAULT_BASE_URL = "https://reginaonline.de"
    HEADLESS_DEFAULT = True


# Configuration mapping for easy access
config = {
    "local": LocalConfig,
    "prod": ProductionConfig,
    "default": LocalConfig,
}


def get_config(target: str | None = None) -> Config:
    """
    Build the configuration for the specified target.

    Args:
        target: Target environment name (local, prod).
                If None, uses the TARGET environment variable.

    Returns:
        Configuration instance with values resolved from the environment.
    """
    if target is None:
        target = os.environ.get("TARGET", "local")
    return config.get(target.lower(), config["default"])()
