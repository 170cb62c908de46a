"""Common models, normalization and store access for the activity gateway services."""

from gateway_common.models import (
    ActivityRecord,
    StoredActivity,
    PydanticToken,
    PydanticAthlete,
    PydanticAthleteStats,
    PydanticSession,
    PydanticMap,
    Base,
    Activity,
    Token,
    Athlete,
    AthleteStats,
    Session,
    Profile,
    Map,
)
from gateway_common.normalize import ACTIVITY_FIELDS, FIELD_RENAMES, normalize_activity, to_activity_record

__version__ = "0.1.0"

__all__ = [
    # Models
    'ActivityRecord',
    'StoredActivity',
    'PydanticToken',
    'PydanticAthlete',
    'PydanticAthleteStats',
    'PydanticSession',
    'PydanticMap',
    'Base',
    'Activity',
    'Token',
    'Athlete',
    'AthleteStats',
    'Session',
    'Profile',
    'Map',
    # Normalization
    'ACTIVITY_FIELDS',
    'FIELD_RENAMES',
    'normalize_activity',
    'to_activity_record',
]
