"""Pydantic models for smell profiles."""

from .smell_profile import (
    DeletionResult,
    ErrorResponse,
    SmellProfile,
    SmellProfileRequest,
    SmellType,
    VERSION_KEY,
)

__all__ = [
    "DeletionResult",
    "ErrorResponse",
    "SmellProfile",
    "SmellProfileRequest",
    "SmellType",
    "VERSION_KEY",
]
