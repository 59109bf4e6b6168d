"""
FastAPI dependency injection for settings, database access and services.

Provides injectable dependencies for:
- Application settings
- The smell profile repository
- The smell profile service
- Pagination parameters

Resources live on ``app.state`` and are created by the application lifespan,
so tests can swap any of them through ``app.dependency_overrides``.
"""

import structlog
from typing import Optional
from fastapi import Depends, Query, Request

from smellmap.config import Settings
from smellmap.exceptions import PersistenceError
from smellmap.repositories.smell_profile_repo import SmellProfileRepository
from smellmap.services.smell_profile_service import SmellProfileService

logger = structlog.get_logger(__name__)

# Largest skip MongoDB accepts (signed 64-bit)
MAX_OFFSET = 2**63 - 1


# ============================================================================
# SETTINGS
# ============================================================================


def get_app_settings(request: Request) -> Settings:
    """
    Get the settings the running application was built with.

    Args:
        request: HTTP request

    Returns:
        Application settings
    """
    return request.app.state.settings


# ============================================================================
# DATABASE
# ============================================================================


def get_smell_profile_repository(request: Request) -> SmellProfileRepository:
    """
    Get the smell profile repository.

    Raises:
        PersistenceError: If the repository is not initialized
    """
    repo = getattr(request.app.state, "smell_profile_repo", None)
    if repo is None:
        logger.error("smell_profile_repository_not_initialized")
        raise PersistenceError("Database not initialized")
    return repo


# ============================================================================
# SERVICE DEPENDENCIES
# ============================================================================


def get_smell_profile_service(
    profile_repo: SmellProfileRepository = Depends(get_smell_profile_repository),
    settings: Settings = Depends(get_app_settings)
) -> SmellProfileService:
    """
    Get smell profile service instance.

    Args:
        profile_repo: Smell profile repository
        settings: Application settings

    Returns:
        SmellProfileService instance
    """
    return SmellProfileService(profile_repo, settings)


# ============================================================================
# PAGINATION
# ============================================================================


class PaginationParams:
    """Pagination parameters for list endpoints."""

    def __init__(self, limit: int, offset: int, max_limit: int):
        """
        Initialize pagination parameters.

        Args:
            limit: Maximum number of items, clamped to 1..max_limit
            offset: Number of items to skip, clamped to 0..MAX_OFFSET
            max_limit: Upper bound for limit
        """
        if limit < 1:
            limit = 1
        elif limit > max_limit:
            limit = max_limit

        if offset < 0:
            offset = 0
        elif offset > MAX_OFFSET:
            offset = MAX_OFFSET

        self.limit = limit
        self.offset = offset


def get_pagination_params(
    limit: Optional[int] = None,
    offset: int = Query(0, le=MAX_OFFSET),
    settings: Settings = Depends(get_app_settings)
) -> PaginationParams:
    """
    Get pagination parameters from query string.

    Args:
        limit: Maximum number of items (default: pagination_default_limit)
        offset: Number of items to skip (default: 0)
        settings: Application settings

    Returns:
        Pagination parameters
    """
    if limit is None:
        limit = settings.pagination_default_limit
    return PaginationParams(
        limit=limit,
        offset=offset,
        max_limit=settings.pagination_max_limit
    )
