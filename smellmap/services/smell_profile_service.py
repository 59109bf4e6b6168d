"""
Smell profile service.

Provides the operations behind the smellmap endpoints:
- Listing and fetching profiles
- Creating and fully replacing profiles
- Deleting profiles with a {deletedId, success} acknowledgment
- Optional strict smell type checks
"""

import structlog
from typing import List, Optional

from smellmap.config import Settings, get_settings
from smellmap.exceptions import SmellProfileNotFoundError, SmellProfileValidationError
from smellmap.models.smell_profile import (
    DeletionResult,
    SmellProfile,
    SmellProfileRequest,
    SmellType,
)
from smellmap.repositories.smell_profile_repo import SmellProfileRepository, parse_object_id

logger = structlog.get_logger(__name__)


class SmellProfileService:
    """Service for smell profile operations."""

    def __init__(
        self,
        profile_repo: SmellProfileRepository,
        settings: Optional[Settings] = None
    ):
        """
        Initialize smell profile service.

        Args:
            profile_repo: Smell profile repository
            settings: Application settings (defaults to cached settings)
        """
        self.profile_repo = profile_repo
        self.settings = settings or get_settings()

    def list_profiles(self, limit: int, offset: int) -> List[SmellProfile]:
        """List stored profiles, oldest first."""
        profiles = self.profile_repo.list_profiles(limit=limit, offset=offset)
        logger.debug("smell_profiles_listed", count=len(profiles), limit=limit, offset=offset)
        return profiles

    def find_profile(self, profile_id: str) -> List[SmellProfile]:
        """
        Find the profile with the given ID.

        Returns:
            A list holding the matching profile, or an empty list
        """
        profile = self.profile_repo.get_profile(profile_id)
        return [profile] if profile else []

    def create_profile(self, request: SmellProfileRequest) -> SmellProfile:
        """
        Store a new profile.

        Raises:
            SmellProfileValidationError: If the smell type is rejected
        """
        self._check_type(request)
        return self.profile_repo.create_profile(request)

    def replace_profile(self, profile_id: str, request: SmellProfileRequest) -> SmellProfile:
        """
        Replace every field of an existing profile.

        Raises:
            SmellProfileNotFoundError: If no profile has this ID
            SmellProfileValidationError: If the smell type is rejected
        """
        self._check_type(request)
        profile = self.profile_repo.replace_profile(profile_id, request)
        if profile is None:
            logger.warning("smell_profile_update_missing", profile_id=profile_id)
            raise SmellProfileNotFoundError(profile_id)
        return profile

    def delete_profile(self, profile_id: str) -> DeletionResult:
        """
        Delete a profile.

        Raises:
            SmellProfileNotFoundError: If no profile has this ID
        """
        if not self.profile_repo.delete_profile(profile_id):
            logger.warning("smell_profile_delete_missing", profile_id=profile_id)
            raise SmellProfileNotFoundError(profile_id)
        return DeletionResult(deleted_id=str(parse_object_id(profile_id)), success=True)

    def _check_type(self, request: SmellProfileRequest) -> None:
        """Reject unknown smell types when strict checking is enabled."""
        if not self.settings.smell_type_strict:
            return

        allowed = [smell_type.value for smell_type in SmellType]
        if request.type not in allowed:
            logger.warning("smell_type_rejected", smell_type=request.type)
            raise SmellProfileValidationError(
                f"type must be one of {allowed}, got: {request.type}"
            )
