"""
Capabilities shared by page objects.

Pages are assembled from small helpers instead of inheriting everything from
one large base: :class:`Navigator` moves between routes and waits for load,
:class:`ViewportInspector` classifies the viewport and :class:`DialogHandler`
arms one-shot expectations for native dialogs. The ``Protocol`` classes name
the capabilities callers rely on.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from re import Pattern
from typing import Literal, Protocol, TypeVar, runtime_checkable

from playwright.sync_api import Dialog, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from blog_e2e.constants import Breakpoints, Timeouts, ViewportClass
from blog_e2e.messages import BasePageMessages

T = TypeVar("T")

DialogAction = Literal["accept", "dismiss"]

READY_STATE_COMPLETE = "() => document.readyState === 'complete'"


@runtime_checkable
class PageReadiness(Protocol):
    def assert_page_loaded(self) -> None: ...


@runtime_checkable
class Navigable(Protocol):
    def goto(self, path: str = "") -> None: ...

    def reload(self) -> None: ...

    def go_back(self) -> None: ...

    def go_forward(self) -> None: ...


@runtime_checkable
class ViewportAware(Protocol):
    def viewport_class(self) -> ViewportClass: ...


# -------------------------------------------------------------------------
# Navigation
# -------------------------------------------------------------------------


class Navigator:
    """Route navigation with a post-navigation load wait."""

    def __init__(self, page: Page, base_url: str, logger: logging.Logger):
        self.page = page
        self.base_url = base_url.rstrip("/")
        self.logger = logger

    def url_for(self, path: str = "") -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    def goto(self, path: str = "") -> None:
        url = self.url_for(path)
        self.logger.info(BasePageMessages.NAVIGATING_TO, url)
        self.page.goto(url, timeout=Timeouts.NAVIGATION)
        self.wait_for_page_load()

    def reload(self) -> None:
        self.logger.debug(BasePageMessages.RELOADING_PAGE)
        self.page.reload(timeout=Timeouts.NAVIGATION)
        self.wait_for_page_load()

    def go_back(self) -> None:
        self.logger.debug(BasePageMessages.GOING_BACK)
        self.page.go_back(timeout=Timeouts.NAVIGATION)
        self.wait_for_page_load()

    def go_forward(self) -> None:
        self.logger.debug(BasePageMessages.GOING_FORWARD)
        self.page.go_forward(timeout=Timeouts.NAVIGATION)
        self.wait_for_page_load()

    def wait_for_page_load(self, timeout: int = Timeouts.PAGE_LOAD) -> None:
        """
        Wait until the network is idle and the document is complete.

        Both conditions share one deadline of ``timeout`` ms.

        Raises:
            playwright.sync_api.TimeoutError: If the deadline passes first.
        """
        deadline = time.monotonic() + timeout / 1000
        self.page.wait_for_load_state("networkidle", timeout=timeout)
        remaining = int((deadline - time.monotonic()) * 1000)
        if remaining <= 0:
            raise PlaywrightTimeoutError(
                f"Timeout {timeout}ms exceeded waiting for the page to load"
            )
        self.page.wait_for_function(READY_STATE_COMPLETE, timeout=remaining)

    def wait_for_url(
        self, url: str | Pattern[str] | Callable[[str], bool], timeout: int = Timeouts.REDIRECT
    ) -> None:
        self.page.wait_for_url(url, timeout=timeout)


# -------------------------------------------------------------------------
# Viewport
# -------------------------------------------------------------------------


def classify_width(width: int) -> ViewportClass:
    if width <= Breakpoints.MOBILE:
        return ViewportClass.MOBILE
    if width <= Breakpoints.TABLET:
        return ViewportClass.TABLET
    return ViewportClass.DESKTOP


class ViewportInspector:
    def __init__(self, page: Page, logger: logging.Logger):
        self.page = page
        self.logger = logger

    def viewport_class(self) -> ViewportClass:
        viewport = self.page.viewport_size
        if not viewport:
            return ViewportClass.UNKNOWN
        return classify_width(viewport["width"])

    def set_viewport_size(self, width: int, height: int) -> None:
        self.page.set_viewport_size({"width": width, "height": height})
        self.logger.debug(BasePageMessages.VIEWPORT_SET, width, height)

    def is_mobile(self) -> bool:
        return self.viewport_class() is ViewportClass.MOBILE

    def is_tablet(self) -> bool:
        return self.viewport_class() is ViewportClass.TABLET

    def is_desktop(self) -> bool:
        return self.viewport_class() is ViewportClass.DESKTOP


# -------------------------------------------------------------------------
# Dialogs
# -------------------------------------------------------------------------


@dataclass
class DialogExpectation:
    """Outcome of one armed dialog handler."""

    action: DialogAction
    expected: str | None = None
    message: str | None = None
    handled: bool = False

    @property
    def matched(self) -> bool:
        if not self.handled:
            return False
        return self.expected is None or self.expected in (self.message or "")


class DialogHandler:
    """Arms single-use handlers for the next native dialog of a page."""

    def __init__(self, page: Page, logger: logging.Logger):
        self.page = page
        self.logger = logger

    def arm(self, action: DialogAction = "accept", expected: str | None = None) -> DialogExpectation:
        """
        Handle the next dialog only; call this before the triggering action.

        Args:
            action: Accept or dismiss the dialog.
            expected: Substring the dialog message should contain; a mismatch
                is logged as a warning and the dialog is still handled.

        Returns:
            Expectation that records the message once the dialog fired.
        """
        if action not in ("accept", "dismiss"):
            raise ValueError(f"Unknown dialog action: {action!r}")
        expectation = DialogExpectation(action=action, expected=expected)

        def _on_dialog(dialog: Dialog) -> None:
            expectation.message = dialog.message
            if expected and expected not in dialog.message:
                self.logger.warning(BasePageMessages.UNEXPECTED_DIALOG, dialog.message, expected)
            if action == "accept":
                dialog.accept()
            else:
                dialog.dismiss()
            expectation.handled = True
            self.logger.debug(BasePageMessages.DIALOG_HANDLED, action, dialog.message)

        self.page.once("dialog", _on_dialog)
        self.logger.debug(BasePageMessages.DIALOG_ARMED, action)
        return expectation

    def handle(
        self,
        trigger: Callable[[], T],
        action: DialogAction = "accept",
        expected: str | None = None,
    ) -> DialogExpectation:
        """Arm a handler, then run ``trigger`` which is expected to open the dialog."""
        expectation = self.arm(action, expected)
        trigger()
        return expectation
