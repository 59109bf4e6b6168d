"""MongoDB repositories."""

from .smell_profile_repo import SmellProfileRepository, parse_object_id

__all__ = ["SmellProfileRepository", "parse_object_id"]
