import pytest
from unittest.mock import AsyncMock, MagicMock, Mock

from gateway_common.db import RecordStore

@pytest.fixture(autouse=True)
def test_env():
    """Ensure we're using test settings."""
    with pytest.MonkeyPatch().context() as mp:
        mp.setenv("ENV_NAME", "test")
        yield

@pytest.fixture
def mock_session():
    """Create a mock async session."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    return session

@pytest.fixture
def session_maker(mock_session):
    """Create a session maker whose sessions are the mock session."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=mock_session)
    context.__aexit__ = AsyncMock(return_value=None)
    return Mock(return_value=context)

@pytest.fixture
def store(session_maker):
    """Create a RecordStore backed by the mock session maker."""
    return RecordStore(session_maker)

@pytest.fixture
def strava_activity():
    """An activity as it appears in a Strava export."""
    return {
        "id": 12345678901,
        "upload_id": 987654321,
        "name": "Morning Run",
        "description": "Easy loop around the park",
        "distance": 10012.3,
        "moving_time": 3012,
        "elapsed_time": 3150,
        "elev_high": 54.2,
        "elev_low": 12.0,
        "total_elevation_gain": 88.0,
        "start_date": "2024-03-02T07:15:00Z",
        "start_date_local": "2024-03-02T08:15:00Z",
        "timezone": "(GMT+01:00) Europe/Paris",
        "kudos_count": 4,
        "athlete_count": 1,
        "average_speed": 3.32,
        "max_speed": 4.9,
        "kilojoules": 712.5,
        "average_watts": 245.1,
        "max_watts": 410,
        "device_watts": True,
        "has_heartrate": True,
        "average_heartrate": 148.2,
        "max_heartrate": 171,
        "map": {"summary_polyline": "abc"},
        "resource_state": 2,
    }
