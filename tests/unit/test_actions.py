"""
Unit tests for the retrying action wrappers.

Locators are MagicMock fakes; ``page.wait_for_timeout`` records the pauses
between attempts instead of sleeping.

Key Concepts Demonstrated:
- side_effect sequences to script flaky elements
- Verifying retry counts and waits through mock calls
"""

from unittest.mock import MagicMock, call

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from blog_e2e.actions import (
    ActionOptions,
    retry_action,
    safe_click,
    safe_fill,
    safe_select_option,
    safe_type,
)
from blog_e2e.constants import Timeouts
from blog_e2e.errors import ActionError, FillValidationError


pytestmark = pytest.mark.unit


class TestSafeClick:
    """Tests for safe_click."""

    def test_waits_scrolls_and_clicks_once(self, make_locator, mock_page):
        """Test that a healthy element is clicked exactly once with the click tier."""
        # Arrange
        locator = make_locator("button")

        # Act
        safe_click(locator)

        # Assert
        locator.wait_for.assert_called_once_with(state="visible", timeout=Timeouts.CLICK)
        locator.scroll_into_view_if_needed.assert_called_once_with(timeout=Timeouts.CLICK)
        locator.click.assert_called_once_with(timeout=Timeouts.CLICK)
        mock_page.wait_for_timeout.assert_not_called()

    def test_recovers_after_transient_failures(self, make_locator, mock_page):
        """Test that two failures followed by success pause twice and then click."""
        # Arrange
        locator = make_locator("button")
        locator.click.side_effect = [
            PlaywrightError("detached"),
            PlaywrightTimeoutError("Timeout 10000ms exceeded"),
            None,
        ]

        # Act
        safe_click(locator)

        # Assert
        assert locator.click.call_count == 3
        assert mock_page.wait_for_timeout.call_args_list == [
            call(Timeouts.POLLING_INTERVAL),
            call(Timeouts.POLLING_INTERVAL),
        ]

    def test_element_that_never_appears_fails_after_all_attempts(self, make_locator, mock_page):
        """Test that three visibility timeouts raise ActionError after two pauses."""
        # Arrange
        locator = make_locator("missing")
        locator.wait_for.side_effect = PlaywrightTimeoutError("Timeout 10000ms exceeded")

        # Act
        with pytest.raises(ActionError) as exc_info:
            safe_click(locator)

        # Assert
        assert exc_info.value.attempts == 3
        assert exc_info.value.action == "click"
        assert isinstance(exc_info.value.__cause__, PlaywrightTimeoutError)
        assert locator.wait_for.call_count == 3
        waited = sum(c.args[0] for c in mock_page.wait_for_timeout.call_args_list)
        assert waited == 2 * Timeouts.POLLING_INTERVAL
        locator.click.assert_not_called()

    def test_explicit_timeout_overrides_tier(self, make_locator):
        """Test that ActionOptions.timeout reaches every step."""
        # Arrange
        locator = make_locator()

        # Act
        safe_click(locator, ActionOptions(timeout=1234))

        # Assert
        locator.click.assert_called_once_with(timeout=1234)
        locator.wait_for.assert_called_once_with(state="visible", timeout=1234)

    def test_skips_optional_preconditions(self, make_locator):
        """Test that visibility wait and scroll can be turned off."""
        # Arrange
        locator = make_locator()
        options = ActionOptions(wait_for_visible=False, scroll_into_view=False)

        # Act
        safe_click(locator, options)

        # Assert
        locator.wait_for.assert_not_called()
        locator.scroll_into_view_if_needed.assert_not_called()
        locator.click.assert_called_once()

    def test_non_playwright_errors_are_not_retried(self, make_locator, mock_page):
        """Test that programming errors propagate on the first attempt."""
        # Arrange
        locator = make_locator()
        locator.click.side_effect = TypeError("bad call")

        # Act / Assert
        with pytest.raises(TypeError):
            safe_click(locator)
        assert locator.click.call_count == 1
        mock_page.wait_for_timeout.assert_not_called()

    def test_rejects_zero_retries(self, make_locator):
        """Test that at least one attempt is required."""
        with pytest.raises(ValueError):
            safe_click(make_locator(), ActionOptions(retries=0))

    def test_retry_failures_are_logged(self, make_locator, quiet_logger):
        """Test that each failed attempt and the final give-up are logged."""
        # Arrange
        locator = make_locator()
        locator.click.side_effect = PlaywrightError("covered by overlay")

        # Act
        with pytest.raises(ActionError):
            safe_click(locator, ActionOptions(retries=2), run_logger=quiet_logger)

        # Assert
        assert quiet_logger.warning.call_count == 1
        assert quiet_logger.error.call_count == 1


class TestSafeFill:
    """Tests for safe_fill read-back validation."""

    def test_exact_value_is_accepted(self, make_locator):
        """Test that an input holding exactly the filled text passes."""
        # Arrange
        locator = make_locator("email", value="hello@example.com")

        # Act
        safe_fill(locator, "hello@example.com")

        # Assert
        locator.clear.assert_called_once_with(timeout=Timeouts.FILL)
        locator.fill.assert_called_once_with("hello@example.com", timeout=Timeouts.FILL)
        locator.input_value.assert_called_once_with(timeout=Timeouts.FILL)

    def test_transformed_value_is_reported(self, make_locator):
        """Test that an input that uppercases its value fails with both values."""
        # Arrange
        locator = make_locator("email", value="HELLO@EXAMPLE.COM")

        # Act
        with pytest.raises(ActionError) as exc_info:
            safe_fill(locator, "hello@example.com")

        # Assert
        last_error = exc_info.value.last_error
        assert isinstance(last_error, FillValidationError)
        assert last_error.expected == "hello@example.com"
        assert last_error.actual == "HELLO@EXAMPLE.COM"
        assert locator.fill.call_count == 3

    def test_sensitive_mismatch_reports_lengths_only(self, make_locator, quiet_logger):
        """Test that a secret never reaches the error text or the retry logs."""
        # Arrange
        secret = "S3cret-Admin-Pass-123"
        locator = make_locator("password", value=secret[:8])

        # Act
        with pytest.raises(ActionError) as exc_info:
            safe_fill(locator, secret, sensitive=True, run_logger=quiet_logger)

        # Assert
        last_error = exc_info.value.last_error
        assert last_error.expected == FillValidationError.MASK
        assert "21 chars" in str(last_error)
        assert secret not in str(exc_info.value)
        assert secret[:8] not in str(exc_info.value)
        assert secret not in str(quiet_logger.mock_calls)

    def test_truncating_input_recovers_when_value_sticks(self, make_locator, mock_page):
        """Test that a mismatch is retried and a later exact read-back succeeds."""
        # Arrange
        locator = make_locator("title")
        locator.input_value.side_effect = ["Hello", "Hello world"]

        # Act
        safe_fill(locator, "Hello world")

        # Assert
        assert locator.fill.call_count == 2
        mock_page.wait_for_timeout.assert_called_once_with(Timeouts.POLLING_INTERVAL)

    def test_validation_and_clear_can_be_disabled(self, make_locator):
        """Test that rich editors can skip read-back and clearing."""
        # Arrange
        locator = make_locator("editor")

        # Act
        safe_fill(locator, "<p>Body</p>", clear=False, validate=False)

        # Assert
        locator.clear.assert_not_called()
        locator.input_value.assert_not_called()


class TestSelectAndType:
    """Tests for safe_select_option and safe_type."""

    def test_select_returns_selected_values(self, make_locator):
        """Test that the selected option values are returned."""
        # Arrange
        locator = make_locator("status")
        locator.select_option.return_value = ["published"]

        # Act
        selected = safe_select_option(locator, "published")

        # Assert
        assert selected == ["published"]
        locator.select_option.assert_called_once_with("published", timeout=Timeouts.SELECT)

    def test_type_presses_keys_with_delay(self, make_locator):
        """Test that typing goes key by key with the requested delay."""
        # Arrange
        locator = make_locator("search")

        # Act
        safe_type(locator, "playwright", delay=50)

        # Assert
        locator.press_sequentially.assert_called_once_with(
            "playwright", delay=50, timeout=Timeouts.TYPE
        )


class TestRetryAction:
    """Tests for retry_action."""

    def test_returns_first_successful_result(self):
        """Test that the result of the first passing attempt is returned."""
        # Arrange
        action = MagicMock(side_effect=[RuntimeError("flaky"), "done"])
        sleep = MagicMock()

        # Act
        result = retry_action(action, retries=3, delay=250, sleep=sleep)

        # Assert
        assert result == "done"
        sleep.assert_called_once_with(250)

    def test_reraises_last_error(self):
        """Test that the final failure propagates unchanged."""
        # Arrange
        action = MagicMock(side_effect=[RuntimeError("one"), RuntimeError("two")])
        sleep = MagicMock()

        # Act
        with pytest.raises(RuntimeError, match="two"):
            retry_action(action, retries=2, sleep=sleep)

        # Assert
        assert action.call_count == 2
        assert sleep.call_count == 1
