"""
Retrying wrappers for single UI actions.

Every wrapper waits for its pre-conditions, performs the action with its own
timeout and, on failure, pauses for ``Timeouts.POLLING_INTERVAL`` before the
next attempt. After the last attempt the failure is raised to the caller as
:class:`~blog_e2e.errors.ActionError`; nothing here swallows errors.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import TypeVar

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator

from blog_e2e.constants import Timeouts
from blog_e2e.errors import ActionError, FillValidationError
from blog_e2e.log import resolve
from blog_e2e.messages import ActionMessages

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS = (PlaywrightError, FillValidationError)


@dataclass(frozen=True)
class ActionOptions:
    """
    Options shared by all action wrappers.

    Attributes:
        timeout: Per-step timeout in ms. ``None`` selects the action's tier
            (click, fill, select or type).
        retries: Maximum number of attempts, at least 1.
        wait_for_visible: Wait for the element to become visible first.
        scroll_into_view: Scroll the element into view before acting.
    """

    timeout: int | None = None
    retries: int = 3
    wait_for_visible: bool = True
    scroll_into_view: bool = True

    def with_timeout(self, tier: Timeouts) -> ActionOptions:
        if self.timeout is not None:
            return self
        return replace(self, timeout=int(tier))


DEFAULT_OPTIONS = ActionOptions()


def _perform(
    action_name: str,
    locator: Locator,
    options: ActionOptions,
    tier: Timeouts,
    body: Callable[[int], T],
    run_logger: logging.Logger | None,
) -> T:
    if options.retries < 1:
        raise ValueError(f"retries must be at least 1, got {options.retries}")

    log = resolve(run_logger, logger)
    timeout = options.with_timeout(tier).timeout
    last_error: BaseException | None = None

    for attempt in range(1, options.retries + 1):
        try:
            if options.wait_for_visible:
                locator.wait_for(state="visible", timeout=timeout)
            if options.scroll_into_view:
                locator.scroll_into_view_if_needed(timeout=timeout)
            return body(timeout)
        except RETRYABLE_ERRORS as exc:
            last_error = exc
            if attempt == options.retries:
                break
            log.warning(
                ActionMessages.ATTEMPT_FAILED,
                action_name,
                attempt,
                options.retries,
                exc,
                int(Timeouts.POLLING_INTERVAL),
            )
            locator.page.wait_for_timeout(int(Timeouts.POLLING_INTERVAL))

    log.error(ActionMessages.GAVE_UP, action_name, options.retries, last_error)
    raise ActionError(action_name, options.retries, last_error) from last_error


def safe_click(
    locator: Locator,
    options: ActionOptions = DEFAULT_OPTIONS,
    run_logger: logging.Logger | None = None,
) -> None:
    """Click ``locator`` with visibility wait, scroll and bounded retries."""

    def _click(timeout: int) -> None:
        locator.click(timeout=timeout)

    _perform("click", locator, options, Timeouts.CLICK, _click, run_logger)


def safe_fill(
    locator: Locator,
    text: str,
    options: ActionOptions = DEFAULT_OPTIONS,
    clear: bool = True,
    validate: bool = True,
    sensitive: bool = False,
    run_logger: logging.Logger | None = None,
) -> None:
    """
    Fill an input and verify the value stuck.

    With ``validate`` on, the value is read back after filling; inputs that
    reject, truncate or transform characters fail the attempt with
    :class:`FillValidationError`, which is retried like any other failure.

    Args:
        locator: Input or textarea locator.
        text: Exact value the field must end up holding.
        options: Retry and timeout options (fill tier by default).
        clear: Clear the field before filling.
        validate: Read the value back and compare.
        sensitive: The value is a secret; mismatches report lengths only.
        run_logger: Logger for retry messages.
    """

    def _fill(timeout: int) -> None:
        if clear:
            locator.clear(timeout=timeout)
        locator.fill(text, timeout=timeout)
        if validate:
            actual = locator.input_value(timeout=timeout)
            if actual != text:
                raise FillValidationError(text, actual, sensitive=sensitive)

    _perform("fill", locator, options, Timeouts.FILL, _fill, run_logger)


def safe_select_option(
    locator: Locator,
    option: str | Sequence[str],
    options: ActionOptions = DEFAULT_OPTIONS,
    run_logger: logging.Logger | None = None,
) -> list[str]:
    """Select one or more options of a ``<select>``; returns the selected values."""

    def _select(timeout: int) -> list[str]:
        return locator.select_option(option, timeout=timeout)

    return _perform("select", locator, options, Timeouts.SELECT, _select, run_logger)


def safe_type(
    locator: Locator,
    text: str,
    delay: int = 100,
    options: ActionOptions = DEFAULT_OPTIONS,
    run_logger: logging.Logger | None = None,
) -> None:
    """Type ``text`` key by key, for inputs that react to individual key events."""

    def _type(timeout: int) -> None:
        locator.press_sequentially(text, delay=delay, timeout=timeout)

    _perform("type", locator, options, Timeouts.TYPE, _type, run_logger)


def retry_action(
    action: Callable[[], T],
    retries: int = 3,
    delay: int = Timeouts.POLLING_INTERVAL,
    sleep: Callable[[int], None] | None = None,
    run_logger: logging.Logger | None = None,
) -> T:
    """
    Run an arbitrary callable with bounded retries.

    Args:
        action: Zero-argument callable to run.
        retries: Maximum number of attempts.
        delay: Pause between attempts in ms.
        sleep: Callable that sleeps for a number of ms. Defaults to
            ``time.sleep``; page objects pass ``page.wait_for_timeout``.
        run_logger: Logger for retry messages.

    Returns:
        Whatever ``action`` returns on its first successful attempt.

    Raises:
        The exception of the last attempt.
    """
    if retries < 1:
        raise ValueError(f"retries must be at least 1, got {retries}")

    log = resolve(run_logger, logger)
    pause = sleep or (lambda ms: time.sleep(ms / 1000))

    for attempt in range(1, retries + 1):
        try:
            return action()
        except Exception as exc:
            if attempt == retries:
                raise
            log.warning(ActionMessages.RETRY, attempt, retries, exc)
            pause(int(delay))

    raise AssertionError("unreachable")  # pragma: no cover
