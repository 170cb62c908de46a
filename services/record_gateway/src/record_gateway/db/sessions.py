from datetime import datetime, timezone

from gateway_common.db import RecordStore
from gateway_common.errors import NotFoundError
from gateway_common.models import PydanticSession

class SessionRepository:
    TABLE = "sessions"
    PROFILE_TABLE = "profiles"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def create_session(self, session_id: str, user_id: str, auth_id: str) -> PydanticSession:
        row = await self.store.insert(
            self.TABLE,
            {
                "session_id": session_id,
                "user_id": user_id,
                "auth_id": auth_id,
                "created_at": datetime.now(timezone.utc),
            },
        )
        return PydanticSession.model_validate(row)

    async def get_session_user(self, session_id: str) -> dict:
        """Resolve a session to the user it was created for."""
        try:
            return await self.store.lookup_one(
                self.TABLE, "session_id", session_id, columns=("user_id", "created_at")
            )
        except NotFoundError as e:
            raise NotFoundError("Session not found") from e

    async def get_auth_id(self, user_id: str) -> dict:
        """Resolve a user to its auth identity."""
        try:
            return await self.store.lookup_one(
                self.PROFILE_TABLE, "user_id", user_id, columns=("auth_id", "created_at")
            )
        except NotFoundError as e:
            raise NotFoundError("Auth mapping not found") from e
