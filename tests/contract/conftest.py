"""Fixtures for HTTP contract tests.

The app runs in-process without its lifespan, with the MongoDB repository
replaced by an in-memory double that keeps the same document layout.
"""

from typing import Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from smellmap.dependencies import get_smell_profile_repository
from smellmap.main import create_app
from smellmap.models.smell_profile import SmellProfile, SmellProfileRequest, VERSION_KEY
from smellmap.repositories.smell_profile_repo import parse_object_id


class InMemorySmellProfileRepository:
    """Dict-backed stand-in for SmellProfileRepository."""

    def __init__(self):
        self.documents: Dict[ObjectId, dict] = {}
        self.healthy = True

    def create_profile(self, request: SmellProfileRequest) -> SmellProfile:
        document = request.to_document()
        document["_id"] = ObjectId()
        document[VERSION_KEY] = 0
        self.documents[document["_id"]] = document
        return SmellProfile.from_document(document)

    def get_profile(self, profile_id: str) -> Optional[SmellProfile]:
        document = self.documents.get(parse_object_id(profile_id))
        return SmellProfile.from_document(document) if document else None

    def list_profiles(self, limit: int = 100, offset: int = 0) -> List[SmellProfile]:
        ordered = [self.documents[key] for key in sorted(self.documents)]
        return [SmellProfile.from_document(d) for d in ordered[offset:offset + limit]]

    def replace_profile(self, profile_id: str, request: SmellProfileRequest) -> Optional[SmellProfile]:
        document = self.documents.get(parse_object_id(profile_id))
        if document is None:
            return None
        document.update(request.to_document())
        document[VERSION_KEY] += 1
        return SmellProfile.from_document(document)

    def delete_profile(self, profile_id: str) -> bool:
        return self.documents.pop(parse_object_id(profile_id), None) is not None

    def drop(self) -> None:
        self.documents.clear()

    def ping(self) -> bool:
        return self.healthy


@pytest.fixture
def profile_repo():
    return InMemorySmellProfileRepository()


@pytest.fixture
def app(settings, profile_repo):
    app = create_app(settings)
    app.dependency_overrides[get_smell_profile_repository] = lambda: profile_repo
    app.state.smell_profile_repo = profile_repo
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def seeded_profile(profile_repo):
    """The profile every scenario starts with."""
    return profile_repo.create_profile(SmellProfileRequest(
        name="ajarvis",
        type="Good",
        desc="Dryer sheets, with a hint of jasmine. Very subtle but it has lingered for some time now.",
        lat=37.51,
        lon=-77.44,
    ))
