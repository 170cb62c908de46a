from gateway_common.models.pydantic import ActivityRecord
from gateway_common.models.pydantic import StoredActivity
from gateway_common.models.pydantic import Token as PydanticToken
from gateway_common.models.pydantic import Athlete as PydanticAthlete
from gateway_common.models.pydantic import AthleteStats as PydanticAthleteStats
from gateway_common.models.pydantic import Session as PydanticSession
from gateway_common.models.pydantic import Map as PydanticMap

from gateway_common.models.sqlalchemy import Base
from gateway_common.models.sqlalchemy import Activity
from gateway_common.models.sqlalchemy import Token
from gateway_common.models.sqlalchemy import Athlete
from gateway_common.models.sqlalchemy import AthleteStats
from gateway_common.models.sqlalchemy import Session
from gateway_common.models.sqlalchemy import Profile
from gateway_common.models.sqlalchemy import Map

__all__ = [
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
]
