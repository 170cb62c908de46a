import logging
from typing import Optional

from fastapi import Request

from gateway_common.db import RecordStore
from record_gateway.config import Settings, get_settings

logger = logging.getLogger(__name__)

def create_store(settings: Optional[Settings] = None) -> RecordStore:
    """Build the store client owned by the running app."""
    settings = settings or get_settings()
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL must be set")
    logger.info("Creating store client")
    return RecordStore.from_url(settings.DATABASE_URL, echo=settings.SQL_ECHO)

def get_store(request: Request) -> RecordStore:
    """Get the store client attached to the app.

    Returns:
        RecordStore: The store client created at startup or passed to create_app
    """
    return request.app.state.store
