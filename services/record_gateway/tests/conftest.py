import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from gateway_common.db import RecordStore
from record_gateway.main import create_app

@pytest.fixture(autouse=True)
def test_env():
    """Ensure we're using test settings."""
    with pytest.MonkeyPatch().context() as mp:
        mp.setenv("ENV_NAME", "test")
        yield

@pytest.fixture
def mock_store():
    """Create a mock store client."""
    return AsyncMock(spec=RecordStore)

@pytest.fixture
def test_app(mock_store):
    """Create a test app instance around the mock store."""
    return create_app(store=mock_store)

@pytest.fixture
def test_client(test_app):
    """Create a test client."""
    return TestClient(test_app)

@pytest.fixture
def created_at():
    return datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc)

@pytest.fixture
def sample_activity_row(created_at):
    """A stored activity row as the store returns it."""
    return {
        "id": 1,
        "external_id": "12345678901",
        "upload_id": None,
        "name": "Morning Run",
        "detail": None,
        "distance": 10012.3,
        "moving_time": 3012,
        "elapsed_time": 3150,
        "high_elevation": None,
        "low_elevation": None,
        "total_elevation_gain": None,
        "start_date": datetime(2024, 3, 2, 7, 15, tzinfo=timezone.utc),
        "start_date_local": None,
        "time_zone": None,
        "achievement_count": 0,
        "kudos_count": 0,
        "comment_count": 0,
        "athlete_count": 1,
        "photo_count": 0,
        "total_photo_count": 0,
        "trainer": False,
        "commute": False,
        "manual": False,
        "private": False,
        "flagged": False,
        "average_speed": None,
        "max_speed": None,
        "calories": None,
        "has_kudoed": False,
        "kilo_joules": None,
        "average_power": None,
        "max_power": None,
        "device_watts": False,
        "has_heart_rate": False,
        "average_heart_rate": None,
        "max_heart_rate": None,
        "created_at": created_at,
    }

@pytest.fixture
def echo_insert(created_at):
    """Insert side effect that returns the record with generated columns added."""
    async def insert(table, record):
        return {"id": 1, "created_at": created_at, **record}
    return insert
