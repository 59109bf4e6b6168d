"""
Smell profile models.

Provides the Pydantic schemas for:
- Smell profile requests (create and full replace)
- Smell profile responses
- Deletion results
- Error responses

Requests carry the longitude as ``lon``; stored documents and responses carry
it as ``long``. Both spellings are accepted on input.
"""

from enum import Enum
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# Version field of stored documents
VERSION_KEY = "__v"


class SmellType(str, Enum):
    """Smell categories reported by the map client."""
    GOOD = "Good"
    NEUTRAL = "Neutral"
    BAD = "Bad"


# ============================================================================
# Pydantic Request Models
# ============================================================================


class SmellProfileRequest(BaseModel):
    """Create or replace request schema."""
    name: str = Field(
        ...,
        min_length=1,
        description="Name of the reporter"
    )
    type: str = Field(
        ...,
        min_length=1,
        description="Smell category, typically Good, Neutral or Bad"
    )
    desc: str = Field(
        ...,
        description="Free text description of the smell"
    )
    lat: float = Field(
        ...,
        ge=-90,
        le=90,
        allow_inf_nan=False,
        description="Latitude in decimal degrees"
    )
    lon: float = Field(
        ...,
        ge=-180,
        le=180,
        allow_inf_nan=False,
        validation_alias=AliasChoices("lon", "long"),
        description="Longitude in decimal degrees (stored as 'long')"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "kchang",
                "type": "Bad",
                "desc": "A smell most foul! Post-rain sewer runoff mixed with old socks.",
                "lat": 37.54,
                "lon": -77.46
            }
        }
    )

    def to_document(self) -> Dict[str, Any]:
        """Render the fields in their stored layout (without id or version)."""
        return {
            "name": self.name,
            "type": self.type,
            "desc": self.desc,
            "lat": self.lat,
            "long": self.lon,
        }


# ============================================================================
# Pydantic Response Models
# ============================================================================


class SmellProfile(BaseModel):
    """Stored smell profile as returned by the API."""
    id: str = Field(
        ...,
        min_length=1,
        description="Profile ID (ObjectId hex string)"
    )
    version: int = Field(
        ...,
        ge=0,
        description="Document version, incremented on every update"
    )
    name: str = Field(..., description="Name of the reporter")
    type: str = Field(..., description="Smell category")
    desc: str = Field(..., description="Free text description of the smell")
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    long: float = Field(..., ge=-180, le=180, description="Longitude")

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "example": {
                "id": "5a1f3d2c9e1b8c0012345678",
                "version": 0,
                "name": "kchang",
                "type": "Bad",
                "desc": "A smell most foul! Post-rain sewer runoff mixed with old socks.",
                "lat": 37.54,
                "long": -77.46
            }
        }
    )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "SmellProfile":
        """Build a response model from a MongoDB document."""
        object_id = document["_id"]
        return cls(
            id=str(object_id) if isinstance(object_id, ObjectId) else object_id,
            version=document.get(VERSION_KEY, 0),
            name=document["name"],
            type=document["type"],
            desc=document["desc"],
            lat=document["lat"],
            long=document["long"],
        )


class DeletionResult(BaseModel):
    """Acknowledgment returned by DELETE."""
    deleted_id: str = Field(
        ...,
        alias="deletedId",
        description="ID of the removed profile"
    )
    success: bool = Field(
        ...,
        description="Whether the profile was removed"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "deletedId": "5a1f3d2c9e1b8c0012345678",
                "success": True
            }
        }
    )


class ErrorResponse(BaseModel):
    """Error response schema."""
    detail: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )
    error_code: Optional[str] = Field(
        None,
        description="Error code"
    )
