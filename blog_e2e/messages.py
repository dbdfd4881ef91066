"""
Centralised log message templates.

Templates use ``%``-style placeholders so they can be handed straight to
``logger.<level>(template, *args)`` and formatted lazily.
"""

from __future__ import annotations


class BasePageMessages:
    NAVIGATING_TO = "Navigating to: %s"
    RELOADING_PAGE = "Reloading page"
    GOING_BACK = "Going back"
    GOING_FORWARD = "Going forward"
    VIEWPORT_SET = "Viewport set to: %sx%s"
    PAGE_LOAD_TIME = "Page load time: %sms"
    DIALOG_ARMED = "Armed one-shot dialog handler (%s)"
    DIALOG_HANDLED = "Dialog handled (%s): %s"
    UNEXPECTED_DIALOG = "Unexpected dialog message: %r (expected to contain %r)"
    FILLING_FORM = "Filling form fields: %s"
    SUBMITTING_FORM = "Submitting form"
    SCREENSHOT_SAVED = "Screenshot saved: %s"


class ActionMessages:
    ATTEMPT_FAILED = "%s attempt %d/%d failed: %s - retrying in %dms"
    GAVE_UP = "%s failed after %d attempt(s): %s"
    RETRY = "Action failed, retrying... (%d/%d): %s"


class AssertionMessages:
    CHECKING = "Asserting %s"
    PASSED = "Assertion passed: %s"
    FAILED = "Assertion failed: %s (%s)"
    SOFT_FAILED = "Soft assertion failed: %s - %s"


class SetupMessages:
    PREPARING_DIRECTORIES = "Preparing auth state directory %s"
    LOGGING_IN = "Logging in as %s via %s"
    LOGIN_VERIFIED = "Login verified for role %s"
    AUTH_STATE_SAVED = "Authentication state saved to: %s"
    VALIDATING_STATE = "Validating session state %s against %s"
    STATE_VALID = "Session state %s is valid"
    STATE_REUSED = "Reusing valid session state %s"
    CREDENTIALS_MISSING = "Credentials for role %s not configured - authenticated tests will be skipped"
    ADMIN_AUTH_FAILED = "Admin authentication setup failed: %s"
    TEST_USER_FAILED = "Test user authentication failed (non-critical): %s"
    FAILURE_SCREENSHOT = "Setup failure screenshot saved: %s"
    AUTH_VALIDATION_FAILED = "Authentication validation failed: %s"
    WAITING_FOR_LOCK = "Waiting for session state lock %s"


class SetupErrors:
    LOGIN_NOT_REDIRECTED = "Login did not redirect to %s within %dms"
    AUTH_FILE_NOT_FOUND = "Authentication file not found: %s"
    AUTH_FILE_INVALID_FORMAT = "Invalid auth file format: %s must contain non-empty 'cookies' and 'origins'"
    AUTH_FILE_UNREADABLE = "Authentication file %s is not valid JSON: %s"
    AUTH_STATE_INVALID = "Authentication state is invalid - redirected to login (%s)"
    ADMIN_AUTH_INVALID = "Admin authentication state is invalid - redirected to login"
    STATE_LOCK_TIMEOUT = "Timed out after %ds waiting for session state lock %s"


class FixtureMessages:
    ACQUIRED = "Fixture %r acquired"
    RELEASED = "Fixture %r released"
    SETUP_ADMIN_PAGE = "Setting up pre-authenticated admin page"
    ADMIN_AUTH_VERIFIED = "Admin authentication verified"
    ADMIN_PAGE_SETUP_FAILED = "Admin page setup failed: %s"
    SETUP_GUEST_PAGE = "Setting up guest page (no authentication)"
    CREATING_API_CONTEXT = "Creating API session for: %s"
    API_CONTEXT_CLOSED = "API session closed"
    API_CLIENT_AUTHENTICATED = "API client authenticated"
    API_CLIENT_AUTH_FAILED = "API client authentication failed - some operations may not work"
    API_CLIENT_AUTH_ERROR = "API client authentication error: %s"
    API_CLIENT_LOGGED_OUT = "API client logged out"
    API_LOGOUT_ERROR = "API logout error (non-critical): %s"


class ApiMessages:
    LOGIN_SUCCESS = "Login successful for: %s"
    LOGIN_FAILED = "Login failed: %s"
    LOGOUT_FAILED = "Logout failed: %s"
    REQUEST_ERROR = "%s %s failed: %s"
    USER_CREATION_FAILED = "User creation failed: %s"
    BLOG_POST_CREATED = "Blog post created: %s"
    BLOG_POST_CREATION_FAILED = "Blog post creation failed: %s"
    BLOG_POST_UPDATE_FAILED = "Blog post update failed: %s"
    BLOG_POST_DELETE_FAILED = "Blog post deletion failed: %s"
    BLOG_POST_PIN_FAILED = "Blog post pin failed: %s"
    BLOG_POST_UNPIN_FAILED = "Blog post unpin failed: %s"
    HEALTH_CHECK_FAILED = "Health check failed: %s"
    CLEANUP_STARTED = "Starting cleanup of test blog posts..."
    TEST_POST_DELETED = "Deleted test blog post: %s"
    CLEANUP_COMPLETED = "Cleanup completed. Deleted %d test blog posts."
    CLEANUP_FAILED = "Cleanup failed: %s"
    RATE_LIMITED = "Rate limited on %s after %d request(s)"
    OPERATION_FAILED = "Operation failed after %dms: %s"
    UNEXPECTED_STATUS = "%s answered %s, expected %d"


class SafetyMessages:
    SKIPPED_ON_PROD = "Destructive test skipped: destructive operations are not allowed on production"
    BLOCKED_OPERATION = (
        "PRODUCTION SAFETY: attempted to run destructive operation %r on production environment"
    )


class RunMessages:
    SUMMARY_WRITTEN = "Test run summary written to %s"
    SUMMARY_FAILED = "Test run summary generation failed: %s"
    FAILURE_SCREENSHOT = "Screenshot saved: %s"
    FAILURE_SCREENSHOT_ERROR = "Failed to capture screenshot: %s"
    TEMP_DIR_REMOVED = "Removed temporary directory %s"
    TEMP_DIR_CLEANUP_FAILED = "Failed to clean temp directory %s: %s"


class WorkflowMessages:
    NO_POSTS = "No posts on the dashboard to %s"
    POST_CREATED = "Workflow created post: %s"
    LIFECYCLE_DELETE_WARNING = "Lifecycle: first dashboard row is not %r, nothing deleted"
    VISITING = "Visiting admin route %s"
