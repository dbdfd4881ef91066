"""
Browser tests for the blog.

Tests receive page objects from the fixture universe named by their
``universe`` marker; the authenticated universe is the default.
"""
