import json
import pytest
from unittest.mock import AsyncMock

from gateway_common.db import RecordStore
from activity_import.config import get_settings

@pytest.fixture(autouse=True)
def test_env():
    """Ensure we're using test settings."""
    with pytest.MonkeyPatch().context() as mp:
        mp.setenv("ENV_NAME", "test")
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

@pytest.fixture
def mock_store():
    """Create a mock store client that accepts every insert."""
    store = AsyncMock(spec=RecordStore)

    async def insert(table, record):
        return {"id": 1, **record}

    store.insert.side_effect = insert
    return store

@pytest.fixture
def sample_records():
    """Activities as they appear in a Strava export."""
    return [
        {"id": 1001, "name": "Morning Run", "distance": 5012.0, "start_date": "2024-03-01T07:00:00Z"},
        {"id": 1002, "name": "Lunch Ride", "average_watts": 180.0, "kudos_count": 3},
        {"id": 1003, "name": "Evening Swim", "has_heartrate": False, "athlete_count": 0},
    ]

@pytest.fixture
def import_file(tmp_path, sample_records):
    """Write the sample records to a JSON file."""
    path = tmp_path / "activities.json"
    path.write_text(json.dumps(sample_records), encoding="utf-8")
    return path
