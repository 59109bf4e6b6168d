"""Fixtures for integration tests against a real MongoDB.

One MongoDB container serves the whole session; each test gets its own
database, dropped on teardown, so tests never see each other's profiles.
"""

import uuid

import pytest
from docker.errors import DockerException
from fastapi.testclient import TestClient

from smellmap.config import Settings
from smellmap.main import create_app
from tests.testcontainers import get_mongodb_container, stop_mongodb_container


@pytest.fixture(scope="session")
def mongodb_container():
    """Start MongoDB container, or skip when Docker is unavailable."""
    try:
        container = get_mongodb_container()
    except DockerException as e:
        pytest.skip(f"Docker is not available: {e}")
    yield container
    stop_mongodb_container()


@pytest.fixture
def mongo_client(mongodb_container):
    """Get MongoDB client."""
    client = mongodb_container.get_client()
    yield client
    client.close()


@pytest.fixture
def integration_settings(mongodb_container):
    """Test-mode settings pointing at a fresh database on the container."""
    return Settings(
        environment="test",
        mongodb_url=mongodb_container.get_connection_url(),
        test_database_name=f"smellmapdev-testing-{uuid.uuid4().hex[:12]}",
        log_format="text",
        _env_file=None,
    )


@pytest.fixture
def client(integration_settings, mongo_client):
    """Client for an app running its full lifespan against MongoDB."""
    app = create_app(integration_settings)
    with TestClient(app) as test_client:
        yield test_client
    mongo_client.drop_database(integration_settings.active_database_name)


@pytest.fixture
def profile_repo(client):
    """Repository of the running app, for seeding data."""
    return client.app.state.smell_profile_repo
