from datetime import datetime, timezone
from typing import Any

from gateway_common.db import RecordStore
from gateway_common.models import PydanticMap

class MapRepository:
    TABLE = "maps"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def create_map(self, map_data: dict[str, Any]) -> PydanticMap:
        row = await self.store.insert(
            self.TABLE,
            {**map_data, "created_at": datetime.now(timezone.utc)},
        )
        return PydanticMap.model_validate(row)
