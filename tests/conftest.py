"""Shared fixtures for the smellmap test suite."""

import pytest

from smellmap.config import Settings
from smellmap.models.smell_profile import SmellProfileRequest


@pytest.fixture
def settings():
    """Settings for an app that does not touch MongoDB at startup."""
    return Settings(
        environment="test",
        mongodb_ping_on_startup=False,
        log_format="text",
        _env_file=None,
    )


@pytest.fixture
def profile_request():
    """A valid create request, as sent by the map client."""
    return SmellProfileRequest(
        name="kchang",
        type="Bad",
        desc="A smell most foul! Post-rain sewer runoff mixed with old socks.",
        lat=37.54,
        lon=-77.46,
    )
