"""
Logging assertion helpers.

Each helper wraps a Playwright ``expect`` call (or a plain predicate for
values and HTTP responses), logs the outcome and returns ``True`` on success.

Failures are hard by default: the ``AssertionError`` is logged and raised
again so pytest marks the test failed. Pass ``soft=True``, or run the calls
inside :func:`soft_assertions`, to log the failure and get ``False`` back
instead.

Usage:
    expect_to_be_visible(page.get_by_test_id("hero"))
    with soft_assertions():
        expect_to_have_count(rows, 3)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from re import Pattern
from typing import Any, Union

from playwright.sync_api import Locator, Page, expect

from blog_e2e.constants import Timeouts
from blog_e2e.log import resolve
from blog_e2e.messages import AssertionMessages

logger = logging.getLogger(__name__)

TextMatcher = Union[str, Pattern[str], Sequence[Union[str, Pattern[str]]]]


class AssertionMode(Enum):
    HARD = "hard"
    SOFT = "soft"


_mode: ContextVar[AssertionMode] = ContextVar("assertion_mode", default=AssertionMode.HARD)


@contextmanager
def soft_assertions() -> Iterator[None]:
    """Make helpers called inside the block log failures instead of raising."""
    token = _mode.set(AssertionMode.SOFT)
    try:
        yield
    finally:
        _mode.reset(token)


def current_mode() -> AssertionMode:
    return _mode.get()


def _evaluate(
    check: Callable[[], Any],
    description: str,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    log = resolve(run_logger, logger)
    log.debug(AssertionMessages.CHECKING, description)
    try:
        check()
    except AssertionError as exc:
        text = message or f"Expected {description}"
        if soft is None:
            soft = _mode.get() is AssertionMode.SOFT
        if soft:
            log.error(AssertionMessages.SOFT_FAILED, text, exc)
            return False
        log.error(AssertionMessages.FAILED, text, exc)
        raise AssertionError(f"{text}: {exc}") from exc
    log.debug(AssertionMessages.PASSED, description)
    return True


def _require(condition: bool, detail: str) -> None:
    if not condition:
        raise AssertionError(detail)


# -------------------------------------------------------------------------
# Explicit hard / soft variants
# -------------------------------------------------------------------------


def assert_hard(
    check: Callable[[], Any],
    description: str,
    run_logger: logging.Logger | None = None,
) -> bool:
    """Run ``check`` and raise on failure regardless of the current mode."""
    return _evaluate(check, description, soft=False, run_logger=run_logger)


def assert_soft(
    check: Callable[[], Any],
    description: str,
    run_logger: logging.Logger | None = None,
) -> bool:
    """Run ``check``; on failure log it and return False."""
    return _evaluate(check, description, soft=True, run_logger=run_logger)


@dataclass
class AssertionResult:
    description: str
    passed: bool
    error: str | None = None


@dataclass
class AssertionSummary:
    passed: int = 0
    failed: int = 0
    results: list[AssertionResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def assert_all(
    checks: Iterable[tuple[Callable[[], Any], str]],
    run_logger: logging.Logger | None = None,
) -> AssertionSummary:
    """
    Run every check, collecting outcomes instead of stopping at the first failure.

    Args:
        checks: ``(callable, description)`` pairs.
        run_logger: Logger for the per-check lines.

    Returns:
        Counts of passed and failed checks plus one result per check.
    """
    log = resolve(run_logger, logger)
    summary = AssertionSummary()
    for check, description in checks:
        try:
            check()
        except AssertionError as exc:
            log.error(AssertionMessages.SOFT_FAILED, description, exc)
            summary.failed += 1
            summary.results.append(AssertionResult(description, False, str(exc)))
        else:
            log.debug(AssertionMessages.PASSED, description)
            summary.passed += 1
            summary.results.append(AssertionResult(description, True))
    return summary


# -------------------------------------------------------------------------
# Element state
# -------------------------------------------------------------------------


def expect_to_be_visible(
    locator: Locator,
    *,
    timeout: int = Timeouts.ELEMENT_VISIBLE,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_visible(timeout=timeout),
        "element to be visible",
        message,
        soft,
        run_logger,
    )


def expect_alternative_locator_to_be_visible(
    primary: Locator,
    alternative: Locator,
    *,
    timeout: int = Timeouts.ELEMENT_VISIBLE,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    """Pass when either the primary or the fallback locator is visible."""
    return _evaluate(
        lambda: expect(primary.or_(alternative).first).to_be_visible(timeout=timeout),
        "primary or fallback element to be visible",
        message,
        soft,
        run_logger,
    )


def expect_to_be_hidden(
    locator: Locator,
    *,
    timeout: int = Timeouts.ELEMENT_HIDDEN,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_hidden(timeout=timeout),
        "element to be hidden",
        message,
        soft,
        run_logger,
    )


def expect_to_be_attached(
    locator: Locator,
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_attached(timeout=timeout),
        "element to be attached",
        message,
        soft,
        run_logger,
    )


def expect_to_be_enabled(
    locator: Locator,
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_enabled(timeout=timeout),
        "element to be enabled",
        message,
        soft,
        run_logger,
    )


def expect_to_be_disabled(
    locator: Locator,
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_disabled(timeout=timeout),
        "element to be disabled",
        message,
        soft,
        run_logger,
    )


def expect_to_be_editable(
    locator: Locator,
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_editable(timeout=timeout),
        "element to be editable",
        message,
        soft,
        run_logger,
    )


def expect_to_be_empty(
    locator: Locator,
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_empty(timeout=timeout),
        "element to be empty",
        message,
        soft,
        run_logger,
    )


def expect_to_be_focused(
    locator: Locator,
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_focused(timeout=timeout),
        "element to be focused",
        message,
        soft,
        run_logger,
    )


def expect_to_be_checked(
    locator: Locator,
    *,
    checked: bool = True,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_be_checked(checked=checked, timeout=timeout),
        f"element checked={checked}",
        message,
        soft,
        run_logger,
    )


# -------------------------------------------------------------------------
# Element content
# -------------------------------------------------------------------------


def expect_to_have_text(
    locator: Locator,
    text: TextMatcher,
    *,
    ignore_case: bool | None = None,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_have_text(text, ignore_case=ignore_case, timeout=timeout),
        f"element to have text {text!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_contain_text(
    locator: Locator,
    text: TextMatcher,
    *,
    ignore_case: bool | None = None,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_contain_text(text, ignore_case=ignore_case, timeout=timeout),
        f"element to contain text {text!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_have_value(
    locator: Locator,
    value: str | Pattern[str],
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_have_value(value, timeout=timeout),
        f"input to have value {value!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_have_attribute(
    locator: Locator,
    name: str,
    value: str | Pattern[str],
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_have_attribute(name, value, timeout=timeout),
        f"attribute {name}={value!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_have_class(
    locator: Locator,
    class_name: TextMatcher,
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_have_class(class_name, timeout=timeout),
        f"element to have class {class_name!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_have_count(
    locator: Locator,
    count: int,
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(locator).to_have_count(count, timeout=timeout),
        f"{count} matching element(s)",
        message,
        soft,
        run_logger,
    )


# -------------------------------------------------------------------------
# Page
# -------------------------------------------------------------------------


def expect_page_to_have_url(
    page: Page,
    url: str | Pattern[str],
    *,
    timeout: int = Timeouts.NAVIGATION,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(page).to_have_url(url, timeout=timeout),
        f"page URL {url!r}",
        message,
        soft,
        run_logger,
    )


def expect_page_url_to_contain(
    page: Page,
    fragment: str,
    *,
    timeout: int = Timeouts.NAVIGATION,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return expect_page_to_have_url(
        page,
        re.compile(re.escape(fragment)),
        timeout=timeout,
        message=message,
        soft=soft,
        run_logger=run_logger,
    )


def expect_page_to_have_title(
    page: Page,
    title: str | Pattern[str],
    *,
    timeout: int = Timeouts.DEFAULT,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: expect(page).to_have_title(title, timeout=timeout),
        f"page title {title!r}",
        message,
        soft,
        run_logger,
    )


# -------------------------------------------------------------------------
# HTTP responses (requests.Response and Playwright responses)
# -------------------------------------------------------------------------


def response_status(response: Any) -> int:
    """Status code of a ``requests`` or Playwright response."""
    status = getattr(response, "status_code", None)
    if status is None:
        status = response.status
    return int(status)


def expect_response_to_be_ok(
    response: Any,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: _require(bool(response.ok), f"status {response_status(response)}"),
        "response to be OK",
        message,
        soft,
        run_logger,
    )


def expect_response_to_have_status(
    response: Any,
    status: int,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: _require(
            response_status(response) == status,
            f"got status {response_status(response)}",
        ),
        f"response status {status}",
        message,
        soft,
        run_logger,
    )


def expect_response_status_to_be_less_than(
    response: Any,
    limit: int,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _evaluate(
        lambda: _require(
            response_status(response) < limit,
            f"got status {response_status(response)}",
        ),
        f"response status below {limit}",
        message,
        soft,
        run_logger,
    )


def expect_response_status_to_be_one_of(
    response: Any,
    statuses: Iterable[int],
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    allowed = tuple(statuses)
    return _evaluate(
        lambda: _require(
            response_status(response) in allowed,
            f"got status {response_status(response)}",
        ),
        f"response status in {allowed}",
        message,
        soft,
        run_logger,
    )


def expect_response_to_have_header(
    response: Any,
    name: str,
    value: str | None = None,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    """Check a response header exists and, when ``value`` is given, contains it."""

    def _check() -> None:
        headers = {key.lower(): val for key, val in response.headers.items()}
        actual = headers.get(name.lower())
        _require(actual is not None, f"header {name!r} missing")
        if value is not None:
            _require(value in actual, f"header {name!r} is {actual!r}")

    return _evaluate(_check, f"response header {name!r}", message, soft, run_logger)


# -------------------------------------------------------------------------
# Plain values
# -------------------------------------------------------------------------


def _value_check(
    condition: Callable[[], bool],
    detail: str,
    description: str,
    message: str | None,
    soft: bool | None,
    run_logger: logging.Logger | None,
) -> bool:
    return _evaluate(lambda: _require(condition(), detail), description, message, soft, run_logger)


def expect_to_be_list(
    value: Any,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: isinstance(value, list),
        f"got {type(value).__name__}",
        "value to be a list",
        message,
        soft,
        run_logger,
    )


def expect_to_be_list_with_length(
    value: Any,
    length: int,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: isinstance(value, list) and len(value) == length,
        f"got {value!r}",
        f"list of length {length}",
        message,
        soft,
        run_logger,
    )


def expect_to_be_truthy(
    value: Any,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: bool(value), f"got {value!r}", "value to be truthy", message, soft, run_logger
    )


def expect_to_be_falsy(
    value: Any,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: not value, f"got {value!r}", "value to be falsy", message, soft, run_logger
    )


def expect_to_be_none(
    value: Any,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: value is None, f"got {value!r}", "value to be None", message, soft, run_logger
    )


def expect_not_to_be_none(
    value: Any,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: value is not None, "got None", "value not to be None", message, soft, run_logger
    )


def expect_to_be_greater_than(
    actual: float,
    expected: float,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: actual > expected,
        f"got {actual!r}",
        f"value greater than {expected!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_be_greater_than_or_equal(
    actual: float,
    expected: float,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: actual >= expected,
        f"got {actual!r}",
        f"value greater than or equal to {expected!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_be_less_than(
    actual: float,
    expected: float,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: actual < expected,
        f"got {actual!r}",
        f"value less than {expected!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_be_instance_of(
    value: Any,
    expected_type: type,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: isinstance(value, expected_type),
        f"got {type(value).__name__}",
        f"instance of {expected_type.__name__}",
        message,
        soft,
        run_logger,
    )


def expect_list_to_contain(
    values: Sequence[Any],
    item: Any,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: item in values,
        f"got {values!r}",
        f"list containing {item!r}",
        message,
        soft,
        run_logger,
    )


def expect_to_equal(
    actual: Any,
    expected: Any,
    *,
    message: str | None = None,
    soft: bool | None = None,
    run_logger: logging.Logger | None = None,
) -> bool:
    return _value_check(
        lambda: actual == expected,
        f"got {actual!r}",
        f"value equal to {expected!r}",
        message,
        soft,
        run_logger,
    )
