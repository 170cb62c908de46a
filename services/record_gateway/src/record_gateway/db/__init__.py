"""Database package for the record gateway service."""

from .database import create_store, get_store
from .activities import ActivityRepository
from .athletes import AthleteRepository
from .maps import MapRepository
from .sessions import SessionRepository
from .tokens import TokenRepository

__all__ = [
    'create_store',
    'get_store',
    'ActivityRepository',
    'AthleteRepository',
    'MapRepository',
    'SessionRepository',
    'TokenRepository',
]
