"""
Smell profile repository for MongoDB operations.

Provides CRUD operations for smell profiles on a pymongo collection.
Documents have the layout ``{_id, name, type, desc, lat, long, __v}``.
Driver failures are logged and re-raised as PersistenceError.
"""

import structlog
from typing import List, Optional

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from smellmap.exceptions import PersistenceError
from smellmap.models.smell_profile import (
    SmellProfile,
    SmellProfileRequest,
    VERSION_KEY,
)

logger = structlog.get_logger(__name__)


def parse_object_id(profile_id: str) -> Optional[ObjectId]:
    """
    Convert a path id to an ObjectId.

    Args:
        profile_id: Hex string from the request path

    Returns:
        ObjectId, or None when the string is not a valid ObjectId
    """
    if not ObjectId.is_valid(profile_id):
        return None
    return ObjectId(profile_id)


class SmellProfileRepository:
    """Repository for smell profile database operations."""

    def __init__(self, collection: Collection):
        """
        Initialize smell profile repository.

        Args:
            collection: pymongo collection holding smell profiles
        """
        self.collection = collection

    def create_profile(self, request: SmellProfileRequest) -> SmellProfile:
        """
        Insert a new smell profile.

        Args:
            request: Validated profile fields

        Returns:
            Stored profile with its assigned id and version

        Raises:
            PersistenceError: On database error
        """
        document = request.to_document()
        document[VERSION_KEY] = 0

        try:
            result = self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error("smell_profile_create_failed", error=str(e), name=request.name)
            raise PersistenceError("Failed to store smell profile") from e

        document["_id"] = result.inserted_id
        logger.info("smell_profile_created", profile_id=str(result.inserted_id))
        return SmellProfile.from_document(document)

    def get_profile(self, profile_id: str) -> Optional[SmellProfile]:
        """
        Get smell profile by ID.

        Args:
            profile_id: Profile ID

        Returns:
            Profile or None if not found
        """
        object_id = parse_object_id(profile_id)
        if object_id is None:
            logger.debug("smell_profile_invalid_id", profile_id=profile_id)
            return None

        try:
            document = self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("smell_profile_get_failed", error=str(e), profile_id=profile_id)
            raise PersistenceError("Failed to read smell profile") from e

        if not document:
            logger.debug("smell_profile_not_found", profile_id=profile_id)
            return None

        return SmellProfile.from_document(document)

    def list_profiles(self, limit: int = 100, offset: int = 0) -> List[SmellProfile]:
        """
        List smell profiles in insertion order.

        Args:
            limit: Maximum number of profiles
            offset: Number of profiles to skip

        Returns:
            List of profiles
        """
        try:
            cursor = (
                self.collection.find({})
                .sort("_id", ASCENDING)
                .skip(offset)
                .limit(limit)
            )
            return [SmellProfile.from_document(document) for document in cursor]
        except PyMongoError as e:
            logger.error("smell_profile_list_failed", error=str(e), limit=limit, offset=offset)
            raise PersistenceError("Failed to list smell profiles") from e

    def replace_profile(
        self,
        profile_id: str,
        request: SmellProfileRequest
    ) -> Optional[SmellProfile]:
        """
        Replace every field of a smell profile, keeping its id.

        The version is incremented in the same atomic update.

        Args:
            profile_id: Profile ID
            request: New profile fields

        Returns:
            Updated profile or None if not found
        """
        object_id = parse_object_id(profile_id)
        if object_id is None:
            logger.debug("smell_profile_invalid_id", profile_id=profile_id)
            return None

        try:
            document = self.collection.find_one_and_update(
                {"_id": object_id},
                {
                    "$set": request.to_document(),
                    "$inc": {VERSION_KEY: 1},
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("smell_profile_update_failed", error=str(e), profile_id=profile_id)
            raise PersistenceError("Failed to update smell profile") from e

        if not document:
            logger.debug("smell_profile_not_found", profile_id=profile_id)
            return None

        logger.info(
            "smell_profile_updated",
            profile_id=profile_id,
            version=document.get(VERSION_KEY)
        )
        return SmellProfile.from_document(document)

    def delete_profile(self, profile_id: str) -> bool:
        """
        Delete smell profile.

        Args:
            profile_id: Profile ID

        Returns:
            True if exactly one profile was removed, False if not found
        """
        object_id = parse_object_id(profile_id)
        if object_id is None:
            logger.debug("smell_profile_invalid_id", profile_id=profile_id)
            return False

        try:
            result = self.collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("smell_profile_delete_failed", error=str(e), profile_id=profile_id)
            raise PersistenceError("Failed to delete smell profile") from e

        deleted = result.deleted_count == 1
        if deleted:
            logger.info("smell_profile_deleted", profile_id=profile_id)
        else:
            logger.debug("smell_profile_not_found", profile_id=profile_id)
        return deleted

    def drop(self) -> None:
        """Remove every smell profile by dropping the collection."""
        try:
            self.collection.drop()
        except PyMongoError as e:
            logger.error("smell_profile_drop_failed", error=str(e))
            raise PersistenceError("Failed to drop smell profiles") from e

        logger.info("smell_profile_collection_dropped", collection=self.collection.name)

    def ping(self) -> bool:
        """
        Check that the database answers.

        Returns:
            True if the server acknowledged a ping
        """
        try:
            result = self.collection.database.command("ping")
        except PyMongoError as e:
            logger.error("database_ping_failed", error=str(e))
            return False
        return bool(result.get("ok"))
