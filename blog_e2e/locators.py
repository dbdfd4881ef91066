"""
Typed builders for ``data-testid`` locators.

Per-row and per-id elements are addressed through :class:`TestIdTemplate`
instead of concatenating test-id strings at call sites, so a malformed id
fails where it is built rather than as an empty match deep inside a test.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from playwright.sync_api import Locator, Page

Root = Union[Page, Locator]

_VALID_ID = re.compile(r"^[^\s\"'\\]+$")


def _validate_id(value: object) -> str:
    text = str(value)
    if not text or not _VALID_ID.match(text):
        raise ValueError(f"Invalid locator id: {value!r}")
    return text


def test_id(value: str) -> str:
    """CSS selector for an element with the given ``data-testid``."""
    return f'[data-testid="{_validate_id(value)}"]'


# Not a test; keep pytest from collecting this module-level helper.
test_id.__test__ = False  # type: ignore[attr-defined]


@dataclass(frozen=True)
class TestIdTemplate:
    """
    A ``data-testid`` pattern with a single ``{id}`` slot.

    Example:
        POST_ROW = TestIdTemplate("post-row-{id}")
        POST_ROW(page, 42)  # page.get_by_test_id("post-row-42")
    """

    __test__ = False

    template: str

    def __post_init__(self) -> None:
        if self.template.count("{id}") != 1:
            raise ValueError(f"Template must contain exactly one '{{id}}' slot: {self.template!r}")

    def format(self, item_id: str | int) -> str:
        return self.template.replace("{id}", _validate_id(item_id))

    def __call__(self, root: Root, item_id: str | int) -> Locator:
        return root.get_by_test_id(self.format(item_id))
