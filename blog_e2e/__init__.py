"""
End-to-end test suite for the blog CMS and portfolio site.

This package contains:
- config/constants/messages: environment configuration and shared tables
- actions/assertions/locators: the interaction layer used by page objects
- pages/: Page Object Model classes
- session_state/auth_setup: persisted login state and the setup pipeline
- api_client/data_factory: HTTP API access and generated test data
- fixture_graph/universes/plugin: per-test resource wiring for pytest
"""

__version__ = "0.1.0"
