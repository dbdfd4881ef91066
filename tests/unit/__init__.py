"""Unit tests for the suite's own layers; no browser or running app needed."""
