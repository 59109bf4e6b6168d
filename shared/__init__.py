"""Logging and metrics helpers shared by smellmap services."""
