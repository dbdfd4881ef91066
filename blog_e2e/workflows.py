"""
Multi-step admin workflows built from page objects.

Page objects expose single screens; the classes here chain them into the
flows admin tests repeat: creating, editing, pinning and deleting posts
from the dashboard, drafting in the editor, and a full post lifecycle that
crosses both screens.

Key Concepts Demonstrated:
- Composing page objects instead of inheriting from them
- Generated, marker-carrying post content for cleanup
- Small result objects instead of loose tuples
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from playwright.sync_api import Page

from blog_e2e.config import Config
from blog_e2e.constants import BlogStatus, Timeouts
from blog_e2e.data_factory import TestDataGenerator
from blog_e2e.log import resolve
from blog_e2e.messages import WorkflowMessages
from blog_e2e.pages import AdminDashboardPage, BlogEditorPage

logger = logging.getLogger(__name__)

PinAction = Literal["pinned", "unpinned"]


@dataclass(frozen=True)
class PinToggle:
    post_id: str | None
    action: PinAction | None


@dataclass(frozen=True)
class PostLifecycle:
    title: str
    post_id: str | None
    deleted: bool


def _post_content(
    test_data: TestDataGenerator,
    title: str | None,
    content: str | None,
    status: BlogStatus,
) -> dict[str, Any]:
    post = test_data.blog_post(title=title, content=content, status=status)
    return {"title": post["title"], "content": post["content"], "excerpt": post["excerpt"]}


class AdminDashboardWorkflows:
    """Dashboard flows; each starts from whatever page the dashboard is on."""

    def __init__(
        self,
        dashboard: AdminDashboardPage,
        editor: BlogEditorPage,
        test_data: TestDataGenerator,
        logger: logging.Logger | None = None,
    ):
        self.dashboard = dashboard
        self.editor = editor
        self.test_data = test_data
        self.logger = resolve(logger, dashboard.logger)

    def create_new_post(self) -> BlogEditorPage:
        self.dashboard.go_to_new_post()
        return self.editor

    def edit_first_post(self) -> str | None:
        post_id = self.dashboard.get_first_post_id()
        if post_id is None:
            self.logger.info(WorkflowMessages.NO_POSTS, "edit")
            return None
        self.dashboard.edit_post(post_id)
        return post_id

    def delete_first_post(self) -> bool:
        """Delete the first listed post and check its row is gone."""
        post_id = self.dashboard.get_first_post_id()
        if post_id is None:
            self.logger.info(WorkflowMessages.NO_POSTS, "delete")
            return False
        self.dashboard.delete_post(post_id)
        self.dashboard.assert_post_not_exists(post_id)
        return True

    def create_complete_post(
        self,
        title: str | None = None,
        content: str | None = None,
        status: BlogStatus = BlogStatus.PUBLISHED,
    ) -> dict[str, Any]:
        """
        Create a post through the dashboard's "new post" button.

        Args:
            title: Post title; a marked, unique title is generated when omitted.
            content: Post body; generated when omitted.
            status: Status chosen in the editor.

        Returns:
            The ``title``, ``content`` and ``excerpt`` that were used.
        """
        post = _post_content(self.test_data, title, content, status)
        self.create_new_post()
        self.editor.create(post["title"], post["content"], status)
        self.logger.info(WorkflowMessages.POST_CREATED, post["title"])
        return post

    def toggle_first_post_pin(self) -> PinToggle:
        """Unpin the first post if it is pinned, otherwise pin it."""
        post_id = self.dashboard.get_first_post_id()
        if post_id is None:
            self.logger.info(WorkflowMessages.NO_POSTS, "pin")
            return PinToggle(None, None)
        if self.dashboard.is_element_visible(self.dashboard.unpin_post_button(post_id)):
            self.dashboard.unpin_post(post_id)
            return PinToggle(post_id, "unpinned")
        self.dashboard.pin_post(post_id)
        return PinToggle(post_id, "pinned")

    def full_validation(self) -> None:
        self.dashboard.open()
        self.dashboard.assert_page_loaded()
        self.dashboard.assert_navigation_visible()
        self.dashboard.assert_statistics_consistent()


class BlogEditorWorkflows:
    """Editor flows that start from the "new post" route."""

    def __init__(
        self,
        editor: BlogEditorPage,
        test_data: TestDataGenerator,
        logger: logging.Logger | None = None,
    ):
        self.editor = editor
        self.test_data = test_data
        self.logger = resolve(logger, editor.logger)

    def create_and_publish_post(
        self, title: str | None = None, content: str | None = None
    ) -> dict[str, Any]:
        post = _post_content(self.test_data, title, content, BlogStatus.PUBLISHED)
        self.editor.goto_new()
        self.editor.create(post["title"], post["content"], BlogStatus.PUBLISHED)
        self.logger.info(WorkflowMessages.POST_CREATED, post["title"])
        return post

    def create_draft_post(
        self, title: str | None = None, content: str | None = None
    ) -> dict[str, Any]:
        """Fill the editor without saving; the caller decides whether to submit."""
        post = _post_content(self.test_data, title, content, BlogStatus.DRAFT)
        self.editor.goto_new()
        self.editor.safe_fill(self.editor.title_input, post["title"])
        self.editor.safe_fill(self.editor.content_editor, post["content"], validate=False)
        return post


class CrossPageWorkflows:
    """Flows that move between the editor and the dashboard."""

    def __init__(
        self,
        dashboard_workflows: AdminDashboardWorkflows,
        editor_workflows: BlogEditorWorkflows,
        logger: logging.Logger | None = None,
    ):
        self.dashboard_workflows = dashboard_workflows
        self.editor_workflows = editor_workflows
        self.dashboard = dashboard_workflows.dashboard
        self.logger = resolve(logger, self.dashboard.logger)

    def post_lifecycle(self) -> PostLifecycle:
        """
        Publish a post in the editor, find it on the dashboard, then delete it.

        The dashboard lists the newest post first. If the first row is not
        the post just created, nothing is deleted and a warning is logged.
        """
        post = self.editor_workflows.create_and_publish_post()
        self.dashboard.open()
        self.dashboard.assert_page_loaded()

        post_id = self.dashboard.get_first_post_id()
        if post_id is None or post["title"] not in self.dashboard.get_element_text(
            self.dashboard.post_title(post_id)
        ):
            self.logger.warning(WorkflowMessages.LIFECYCLE_DELETE_WARNING, post["title"])
            return PostLifecycle(post["title"], post_id, False)

        self.dashboard.delete_post(post_id)
        self.dashboard.assert_post_not_exists(post_id)
        return PostLifecycle(post["title"], post_id, True)

    def admin_navigation(self, *paths: str) -> None:
        """Visit each admin route from the dashboard and come back with history."""
        self.dashboard.open()
        self.dashboard.assert_page_loaded()
        for path in paths or (self.editor_workflows.editor.path,):
            self.logger.debug(WorkflowMessages.VISITING, path)
            self.dashboard.goto(path)
            self.dashboard.go_back()
            self.dashboard.wait_for_url(f"**{self.dashboard.path}*", Timeouts.NAVIGATION)
        self.dashboard.assert_page_loaded()


@dataclass(frozen=True)
class Workflows:
    admin_dashboard: AdminDashboardWorkflows
    blog_editor: BlogEditorWorkflows
    cross_page: CrossPageWorkflows


def create_workflows(
    page: Page,
    config: Config,
    test_data: TestDataGenerator | None = None,
    run_logger: logging.Logger | None = None,
) -> Workflows:
    """Build all workflow groups over one authenticated page."""
    log = resolve(run_logger, logger)
    data = test_data or TestDataGenerator()
    dashboard = AdminDashboardPage(
        page,
        config.base_url,
        config.dashboard_path,
        logger=log,
        screenshots_dir=config.screenshots_dir,
    )
    editor = BlogEditorPage(
        page,
        config.base_url,
        config.content_create_path,
        logger=log,
        screenshots_dir=config.screenshots_dir,
    )
    admin_dashboard = AdminDashboardWorkflows(dashboard, editor, data, log)
    blog_editor = BlogEditorWorkflows(editor, data, log)
    return Workflows(
        admin_dashboard=admin_dashboard,
        blog_editor=blog_editor,
        cross_page=CrossPageWorkflows(admin_dashboard, blog_editor, log),
    )
