"""
Test suite for the blog end-to-end package.

This package contains:
- unit/: suite internals tested against mocked Playwright objects
- e2e/: browser flows against a running blog
- api/: REST API checks using the suite's API client
- smoke/: quick health checks
"""
