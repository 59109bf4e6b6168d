"""FastAPI service for smell profiles.

This package provides REST API endpoints for creating, listing, fetching,
replacing and deleting smell profiles stored in MongoDB.
"""

__version__ = "1.0.0"
