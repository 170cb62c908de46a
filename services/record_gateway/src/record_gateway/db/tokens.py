from datetime import datetime, timezone
import logging

from gateway_common.db import RecordStore
from gateway_common.errors import ConflictError, NotFoundError, ValidationError
from gateway_common.models import PydanticToken

logger = logging.getLogger(__name__)

class TokenRepository:
    TABLE = "tokens"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def upsert_token(
        self,
        user_id: str,
        refresh_token: str,
        access_token: str,
        expires_at: int,
    ) -> PydanticToken:
        """Create or replace the token pair for a user.

        Args:
            user_id: Owner of the tokens, unique per row
            refresh_token: OAuth refresh token
            access_token: OAuth access token
            expires_at: Access token expiry in epoch seconds

        Raises:
            ConflictError: The write collided with another unique row
            ValidationError: expires_at is not a representable timestamp
        """
        try:
            expiry = datetime.fromtimestamp(expires_at, tz=timezone.utc)
        except (OverflowError, ValueError, OSError) as e:
            raise ValidationError(f"expires_at is out of range: {expires_at}") from e

        record = {
            "user_id": user_id,
            "refresh_token": refresh_token,
            "access_token": access_token,
            "expires_at": expiry,
            "updated_at": datetime.now(timezone.utc),
        }
        try:
            row = await self.store.upsert(self.TABLE, "user_id", record)
        except ConflictError as e:
            logger.error(f"Token conflict for user {user_id}: {e.message}")
            raise ConflictError("Token conflict occurred") from e
        return PydanticToken.model_validate(row)

    async def get_access_token(self, user_id: str) -> dict:
        row = await self.store.find_one(self.TABLE, "user_id", user_id, columns=("access_token", "expires_at"))
        if row is None:
            raise NotFoundError("Access token not found")
        if not row["access_token"]:
            raise NotFoundError("Access token not found for this user")
        return row

    async def get_refresh_token(self, user_id: str) -> dict:
        try:
            return await self.store.lookup_one(
                self.TABLE, "user_id", user_id, columns=("refresh_token", "expires_at")
            )
        except NotFoundError as e:
            raise NotFoundError("Refresh token not found") from e
