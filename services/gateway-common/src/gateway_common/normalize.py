from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from gateway_common.errors import ValidationError
from gateway_common.models import ActivityRecord

# Strava export name -> activities column name
FIELD_RENAMES = {
    "id": "external_id",
    "description": "detail",
    "elev_high": "high_elevation",
    "elev_low": "low_elevation",
    "timezone": "time_zone",
    "kilojoules": "kilo_joules",
    "average_watts": "average_power",
    "max_watts": "max_power",
    "has_heartrate": "has_heart_rate",
    "average_heartrate": "average_heart_rate",
    "max_heartrate": "max_heart_rate",
}

ACTIVITY_FIELDS = (
    "external_id",
    "upload_id",
    "name",
    "detail",
    "distance",
    "moving_time",
    "elapsed_time",
    "high_elevation",
    "low_elevation",
    "total_elevation_gain",
    "start_date",
    "start_date_local",
    "time_zone",
    "achievement_count",
    "kudos_count",
    "comment_count",
    "athlete_count",
    "photo_count",
    "total_photo_count",
    "trainer",
    "commute",
    "manual",
    "private",
    "flagged",
    "average_speed",
    "max_speed",
    "calories",
    "has_kudoed",
    "kilo_joules",
    "average_power",
    "max_power",
    "device_watts",
    "has_heart_rate",
    "average_heart_rate",
    "max_heart_rate",
)

# Falsy values fall back to these, so a zero athlete_count becomes 1.
FIELD_DEFAULTS = {
    "achievement_count": 0,
    "kudos_count": 0,
    "comment_count": 0,
    "athlete_count": 1,
    "photo_count": 0,
    "total_photo_count": 0,
    "trainer": False,
    "commute": False,
    "manual": False,
    "private": False,
    "flagged": False,
    "has_kudoed": False,
    "device_watts": False,
    "has_heart_rate": False,
}

STRING_ID_FIELDS = ("external_id", "upload_id")

_SOURCE_NAMES = {target: source for source, target in FIELD_RENAMES.items()}


def _read(record: Mapping, field: str) -> Any:
    """Read a column value, preferring the Strava name over the column name."""
    source = _SOURCE_NAMES.get(field)
    if source is not None and record.get(source) is not None:
        return record[source]
    return record.get(field)


def normalize_activity(record: Any) -> dict[str, Any]:
    """Map a loosely-typed activity onto the fixed activities column set.

    Never raises: unknown keys are dropped, missing keys become defaults
    or None, and anything that is not a mapping is treated as empty.
    The result always has exactly the keys in ACTIVITY_FIELDS, and
    normalizing a normalized record returns an equal record.
    """
    if not isinstance(record, Mapping):
        record = {}

    normalized = {}
    for field in ACTIVITY_FIELDS:
        value = _read(record, field)
        if field in FIELD_DEFAULTS:
            value = value or FIELD_DEFAULTS[field]
        elif field in STRING_ID_FIELDS and value is not None:
            # 123.0 -> "123"
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            value = str(value)
        normalized[field] = value
    return normalized


def to_activity_record(record: Any) -> ActivityRecord:
    """Normalize a raw activity and coerce it into a typed ActivityRecord.

    Raises:
        ValidationError: A present value has the wrong type, e.g. an
            unparseable start_date.
    """
    try:
        return ActivityRecord.model_validate(normalize_activity(record))
    except PydanticValidationError as e:
        fields = ", ".join(str(error["loc"][0]) for error in e.errors() if error["loc"])
        raise ValidationError(f"Invalid activity fields: {fields}") from e
