import logging
from typing import Any, List

from gateway_common.db import RecordStore
from gateway_common.errors import NotFoundError
from gateway_common.models import StoredActivity
from gateway_common.normalize import to_activity_record

logger = logging.getLogger(__name__)

class ActivityRepository:
    TABLE = "activities"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def get_activities(self) -> List[StoredActivity]:
        """Get every stored activity."""
        rows = await self.store.select_all(self.TABLE)
        return [StoredActivity.model_validate(row) for row in rows]

    async def get_activity(self, activity_id: int) -> StoredActivity:
        """Get an activity by ID.

        Args:
            activity_id: The generated ID of the activity

        Returns:
            The stored activity

        Raises:
            NotFoundError: No activity has this ID
        """
        try:
            row = await self.store.lookup_one(self.TABLE, "id", activity_id)
        except NotFoundError as e:
            raise NotFoundError("Activity not found") from e
        return StoredActivity.model_validate(row)

    async def create_activity(self, activity_data: dict[str, Any]) -> StoredActivity:
        """Normalize a raw activity and insert it.

        Args:
            activity_data: Activity in Strava export or column layout

        Returns:
            The stored activity, generated ID included
        """
        record = to_activity_record(activity_data)
        row = await self.store.insert(self.TABLE, record.model_dump())
        logger.debug(f"Stored activity {row.get('id')} ({record.name})")
        return StoredActivity.model_validate(row)
