"""
Page Object Model (POM) classes for the blog site.

Each page object bundles data-testid locators, retrying actions and
logging assertions for one screen. Pages are built per test inside a
fixture scope and never shared.
"""

from blog_e2e.pages.admin_dashboard_page import AdminDashboardPage
from blog_e2e.pages.admin_login_page import AdminLoginPage
from blog_e2e.pages.base_page import BasePage
from blog_e2e.pages.blog_editor_page import BlogEditorPage
from blog_e2e.pages.blog_page import BlogPage
from blog_e2e.pages.capabilities import (
    DialogHandler,
    Navigable,
    Navigator,
    PageReadiness,
    ViewportAware,
    ViewportInspector,
)
from blog_e2e.pages.home_page import HomePage

__all__ = [
    "AdminDashboardPage",
    "AdminLoginPage",
    "BasePage",
    "BlogEditorPage",
    "BlogPage",
    "DialogHandler",
    "HomePage",
    "Navigable",
    "Navigator",
    "PageReadiness",
    "ViewportAware",
    "ViewportInspector",
]
