"""Exceptions raised by the suite's own layers.

Assertion failures are plain ``AssertionError`` so pytest reports them as
test failures; everything here marks a broken action, setup step or fixture
definition.
"""

from __future__ import annotations


class SuiteError(Exception):
    """Base class for errors raised by blog_e2e."""


class ActionError(SuiteError):
    """A UI action still failed after its last retry."""

    def __init__(self, action: str, attempts: int, last_error: BaseException):
        self.action = action
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{action} failed after {attempts} attempt(s): {last_error}")


class FillValidationError(SuiteError):
    """
    The value read back from an input differs from the value that was set.

    With ``sensitive`` set, only the value lengths are kept and reported so
    secrets never reach logs or tracebacks.
    """

    MASK = "***"

    def __init__(self, expected: str, actual: str, sensitive: bool = False):
        self.sensitive = sensitive
        if sensitive:
            self.expected = self.actual = self.MASK
            detail = f"expected {len(expected)} chars, got {len(actual)} chars (value masked)"
        else:
            self.expected = expected
            self.actual = actual
            detail = f"expected {expected!r}, got {actual!r}"
        super().__init__(f"Input value mismatch: {detail}")


class AuthSetupError(SuiteError):
    """An authentication pipeline step failed; dependent tests must not run."""


class CredentialsMissing(SuiteError):
    """Credentials for a role are not configured in the environment."""


class SessionStateError(SuiteError):
    """A persisted session state file is missing, unreadable or structurally invalid."""


class FixtureGraphError(SuiteError):
    """A fixture graph definition or resolution is invalid."""


class FixtureCycleError(FixtureGraphError):
    """Fixture dependencies form a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__("Fixture dependency cycle: " + " -> ".join(cycle))


class UnknownFixtureError(FixtureGraphError):
    """A fixture or dependency name is not registered in the graph."""


class ProductionSafetyError(SuiteError):
    """A destructive operation was attempted against production."""
