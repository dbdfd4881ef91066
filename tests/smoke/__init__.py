"""Smoke checks for a deployed blog."""
