"""
Unit tests for the logging assertion layer.

Playwright's ``expect`` is patched so element checks can be made to pass or
fail on demand.
"""

import inspect
from unittest.mock import MagicMock, patch

import pytest

from blog_e2e import assertions
from blog_e2e.assertions import (
    AssertionMode,
    assert_all,
    assert_hard,
    assert_soft,
    current_mode,
    expect_alternative_locator_to_be_visible,
    expect_list_to_contain,
    expect_response_status_to_be_one_of,
    expect_response_to_be_ok,
    expect_response_to_have_header,
    expect_response_to_have_status,
    expect_to_be_greater_than,
    expect_to_be_list_with_length,
    expect_to_be_visible,
    expect_to_equal,
    expect_to_have_text,
    response_status,
    soft_assertions,
)


pytestmark = pytest.mark.unit


def _failing(message: str = "Locator expected to be visible"):
    def _raise(*args, **kwargs):
        raise AssertionError(message)

    return _raise


@pytest.fixture
def patched_expect():
    with patch.object(assertions, "expect") as fake_expect:
        yield fake_expect


class TestHardAndSoftModes:
    """Tests for failure handling modes."""

    def test_passing_check_returns_true(self, patched_expect, make_locator, quiet_logger):
        """Test that a passing check returns True and logs at debug only."""
        # Arrange
        locator = make_locator()

        # Act
        result = expect_to_be_visible(locator, run_logger=quiet_logger)

        # Assert
        assert result is True
        patched_expect.return_value.to_be_visible.assert_called_once()
        quiet_logger.error.assert_not_called()

    def test_failures_raise_by_default(self, patched_expect, make_locator, quiet_logger):
        """Test that a failed check is logged and raised in the default mode."""
        # Arrange
        patched_expect.return_value.to_be_visible.side_effect = _failing()

        # Act
        with pytest.raises(AssertionError, match="Hero should be visible"):
            expect_to_be_visible(
                make_locator(), message="Hero should be visible", run_logger=quiet_logger
            )

        # Assert
        quiet_logger.error.assert_called_once()

    def test_soft_flag_returns_false(self, patched_expect, make_locator, quiet_logger):
        """Test that soft=True logs the failure and returns False."""
        # Arrange
        patched_expect.return_value.to_have_text.side_effect = _failing("text mismatch")

        # Act
        result = expect_to_have_text(make_locator(), "Blog", soft=True, run_logger=quiet_logger)

        # Assert
        assert result is False
        quiet_logger.error.assert_called_once()

    def test_soft_block_applies_and_resets(self, patched_expect, make_locator):
        """Test that soft_assertions covers calls inside the block and then restores hard mode."""
        # Arrange
        patched_expect.return_value.to_be_visible.side_effect = _failing()

        # Act
        with soft_assertions():
            inside = expect_to_be_visible(make_locator())
            mode_inside = current_mode()

        # Assert
        assert inside is False
        assert mode_inside is AssertionMode.SOFT
        assert current_mode() is AssertionMode.HARD
        with pytest.raises(AssertionError):
            expect_to_be_visible(make_locator())

    def test_explicit_hard_wins_inside_soft_block(self):
        """Test that assert_hard raises even inside soft_assertions."""
        with soft_assertions():
            with pytest.raises(AssertionError):
                assert_hard(_failing("boom"), "always fails")

    def test_assert_soft_returns_false(self):
        """Test that assert_soft never raises."""
        assert assert_soft(_failing("boom"), "always fails") is False

    def test_non_assertion_errors_propagate(self):
        """Test that only assertion failures are softened."""
        def _broken():
            raise RuntimeError("browser closed")

        with soft_assertions():
            with pytest.raises(RuntimeError):
                assert_soft(_broken, "broken check")


class TestAssertAll:
    """Tests for assert_all."""

    def test_collects_every_outcome(self, quiet_logger):
        """Test that all checks run and are counted."""
        # Arrange
        checks = [
            (lambda: None, "first"),
            (_failing("nope"), "second"),
            (lambda: None, "third"),
        ]

        # Act
        summary = assert_all(checks, run_logger=quiet_logger)

        # Assert
        assert summary.passed == 2
        assert summary.failed == 1
        assert not summary.ok
        assert [r.description for r in summary.results] == ["first", "second", "third"]
        assert summary.results[1].error == "nope"


class TestLocatorAssertions:
    """Tests for locator-specific helpers."""

    def test_alternative_locator_combines_with_or(self, patched_expect, make_locator):
        """Test that either locator satisfies the visibility check."""
        # Arrange
        primary = make_locator("primary")
        alternative = make_locator("alternative")

        # Act
        expect_alternative_locator_to_be_visible(primary, alternative)

        # Assert
        primary.or_.assert_called_once_with(alternative)
        patched_expect.assert_called_once_with(primary.or_.return_value.first)


class TestResponseAssertions:
    """Tests for HTTP response helpers."""

    def test_status_reads_requests_and_playwright_responses(self):
        """Test that status_code and status are both understood."""
        requests_response = MagicMock(status_code=201)
        playwright_response = MagicMock(spec=["status"], status=204)

        assert response_status(requests_response) == 201
        assert response_status(playwright_response) == 204

    def test_status_checks(self):
        """Test that exact and set status checks compare the code."""
        response = MagicMock(status_code=404, ok=False)

        assert expect_response_to_have_status(response, 404)
        assert expect_response_status_to_be_one_of(response, (401, 404))
        with pytest.raises(AssertionError):
            expect_response_to_be_ok(response)

    def test_header_lookup_is_case_insensitive(self):
        """Test that header names match regardless of case."""
        response = MagicMock(headers={"Content-Type": "application/json; charset=utf-8"})

        assert expect_response_to_have_header(response, "content-type", "application/json")
        assert not expect_response_to_have_header(response, "x-missing", soft=True)


class TestValueAssertions:
    """Tests for plain value helpers."""

    def test_value_helpers_pass(self):
        assert expect_to_equal(3, 3)
        assert expect_to_be_greater_than(5, 1)
        assert expect_list_to_contain(["a", "b"], "b")
        assert expect_to_be_list_with_length([1, 2], 2)

    def test_value_helper_failure_names_actual_value(self):
        """Test that the failure message carries the actual value."""
        with pytest.raises(AssertionError, match="got 2"):
            expect_to_equal(2, 3)

    @pytest.mark.parametrize(
        "helper",
        [
            getattr(assertions, name)
            for name in sorted(dir(assertions))
            if name.startswith("expect_")
        ],
        ids=lambda helper: helper.__name__,
    )
    def test_every_helper_annotates_shared_keywords(self, helper):
        """Test that message, soft and run_logger are annotated on every expect_* helper."""
        parameters = inspect.signature(helper).parameters

        for name in ("message", "soft", "run_logger"):
            assert parameters[name].kind is inspect.Parameter.KEYWORD_ONLY
            assert parameters[name].annotation is not inspect.Parameter.empty
