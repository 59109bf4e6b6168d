"""
Error taxonomy for the smellmap service.

Each error carries the HTTP status code and error code it is surfaced with,
so the application's exception handler can render a uniform
``{"detail": ..., "error_code": ...}`` body.
"""

from typing import Optional


class SmellmapError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    error_code: str = "SMELLMAP_000"

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if error_code is not None:
            self.error_code = error_code


class SmellProfileNotFoundError(SmellmapError):
    """No smell profile exists with the requested id."""

    status_code = 404
    error_code = "SMELL_001"

    def __init__(self, profile_id: str):
        super().__init__(f"Smell profile '{profile_id}' not found")
        self.profile_id = profile_id


class SmellProfileValidationError(SmellmapError):
    """A smell profile failed a domain check the request schema does not cover."""

    status_code = 422
    error_code = "SMELL_002"


class PersistenceError(SmellmapError):
    """The document store is unavailable or rejected an operation."""

    status_code = 503
    error_code = "DB_001"
