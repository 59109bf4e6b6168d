"""Smellmap test suite."""
