import logging
from typing import Any, List

from gateway_common.db import RecordStore
from gateway_common.models import PydanticAthlete, PydanticAthleteStats

logger = logging.getLogger(__name__)

class AthleteRepository:
    """Partial updates of athlete profiles and their stats, keyed by user_id."""

    PROFILE_TABLE = "athletes"
    STATS_TABLE = "athlete_stats"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def update_athlete(self, user_id: str, athlete_data: dict[str, Any]) -> List[PydanticAthlete]:
        rows = await self.store.partial_update(self.PROFILE_TABLE, "user_id", user_id, athlete_data)
        if not rows:
            logger.warning(f"No athlete row for user {user_id}")
        return [PydanticAthlete.model_validate(row) for row in rows]

    async def update_athlete_stats(self, user_id: str, stats_data: dict[str, Any]) -> List[PydanticAthleteStats]:
        rows = await self.store.partial_update(self.STATS_TABLE, "user_id", user_id, stats_data)
        if not rows:
            logger.warning(f"No athlete stats row for user {user_id}")
        return [PydanticAthleteStats.model_validate(row) for row in rows]
