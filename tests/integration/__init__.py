"""Integration tests against MongoDB."""
