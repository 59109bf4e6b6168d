"""
Smellmap router for smell profile CRUD operations.

Provides REST API endpoints for:
- Listing smell profiles
- Fetching a smell profile by ID
- Creating, replacing and deleting smell profiles

Handlers are synchronous; FastAPI runs them on its threadpool so the
blocking pymongo calls do not stall the event loop.
"""

import structlog
from typing import List
from fastapi import APIRouter, Depends, status

from smellmap.models.smell_profile import (
    DeletionResult,
    ErrorResponse,
    SmellProfile,
    SmellProfileRequest,
)
from smellmap.services.smell_profile_service import SmellProfileService
from smellmap.dependencies import (
    get_smell_profile_service,
    get_pagination_params,
    PaginationParams,
)

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/smellmap",
    tags=["Smell Profiles"],
    responses={
        422: {"description": "Validation Error"},
        503: {"model": ErrorResponse, "description": "Database unavailable"}
    }
)


@router.get(
    "",
    response_model=List[SmellProfile],
    status_code=status.HTTP_200_OK,
    summary="List Smell Profiles",
    description="""
    List stored smell profiles, oldest first.

    **Query Parameters:**
    - limit: Maximum number of profiles (default: 100)
    - offset: Number of profiles to skip (default: 0)

    **Success Response (200):**
    Array of profiles with id, version, name, type, desc, lat and long.
    """
)
def list_smell_profiles(
    pagination: PaginationParams = Depends(get_pagination_params),
    service: SmellProfileService = Depends(get_smell_profile_service)
) -> List[SmellProfile]:
    """
    List smell profiles.

    Args:
        pagination: Pagination parameters
        service: Smell profile service

    Returns:
        List of profiles
    """
    return service.list_profiles(limit=pagination.limit, offset=pagination.offset)


@router.get(
    "/{profile_id}",
    response_model=List[SmellProfile],
    status_code=status.HTTP_200_OK,
    summary="Get Smell Profile",
    description="""
    Get the smell profile with the given ID.

    **Success Response (200):**
    Array holding the matching profile, or an empty array when no profile
    has this ID.
    """
)
def get_smell_profile(
    profile_id: str,
    service: SmellProfileService = Depends(get_smell_profile_service)
) -> List[SmellProfile]:
    """
    Get smell profile by ID.

    Args:
        profile_id: Profile ID
        service: Smell profile service

    Returns:
        List with zero or one profile
    """
    return service.find_profile(profile_id)


@router.post(
    "",
    response_model=SmellProfile,
    status_code=status.HTTP_200_OK,
    summary="Create Smell Profile",
    description="""
    Store a new smell profile.

    **Request Body:**
    - name: Reporter name
    - type: Smell category (Good, Neutral, Bad)
    - desc: Description
    - lat: Latitude (-90 to 90)
    - lon: Longitude (-180 to 180), returned as `long`

    **Success Response (200):**
    The stored profile.
    """
)
def create_smell_profile(
    profile_request: SmellProfileRequest,
    service: SmellProfileService = Depends(get_smell_profile_service)
) -> SmellProfile:
    """
    Create smell profile.

    Args:
        profile_request: Profile fields
        service: Smell profile service

    Returns:
        Created profile
    """
    return service.create_profile(profile_request)


@router.put(
    "/{profile_id}",
    response_model=SmellProfile,
    status_code=status.HTTP_200_OK,
    summary="Replace Smell Profile",
    description="""
    Replace every field of an existing smell profile. The ID is kept and the
    version is incremented.

    **Error Responses:**
    - 404: No profile has this ID
    """,
    responses={
        404: {"model": ErrorResponse, "description": "Smell profile not found"}
    }
)
def replace_smell_profile(
    profile_id: str,
    profile_request: SmellProfileRequest,
    service: SmellProfileService = Depends(get_smell_profile_service)
) -> SmellProfile:
    """
    Replace smell profile.

    Args:
        profile_id: Profile ID
        profile_request: New profile fields
        service: Smell profile service

    Returns:
        Updated profile
    """
    return service.replace_profile(profile_id, profile_request)


@router.delete(
    "/{profile_id}",
    response_model=DeletionResult,
    status_code=status.HTTP_200_OK,
    summary="Delete Smell Profile",
    description="""
    Delete a smell profile.

    **Success Response (200):**
    - deletedId: ID of the removed profile
    - success: true

    **Error Responses:**
    - 404: No profile has this ID
    """,
    responses={
        404: {"model": ErrorResponse, "description": "Smell profile not found"}
    }
)
def delete_smell_profile(
    profile_id: str,
    service: SmellProfileService = Depends(get_smell_profile_service)
) -> DeletionResult:
    """
    Delete smell profile.

    Args:
        profile_id: Profile ID
        service: Smell profile service

    Returns:
        Deletion acknowledgment
    """
    result = service.delete_profile(profile_id)
    logger.info("smell_profile_delete_acknowledged", profile_id=profile_id)
    return result
