from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict

class ActivityRecord(BaseModel):
    """Activity in the column layout of the activities table."""
    model_config = ConfigDict(from_attributes=True)

    external_id: Optional[str] = None
    upload_id: Optional[str] = None
    name: Optional[str] = None
    detail: Optional[str] = None
    distance: Optional[float] = None
    moving_time: Optional[int] = None
    elapsed_time: Optional[int] = None
    high_elevation: Optional[float] = None
    low_elevation: Optional[float] = None
    total_elevation_gain: Optional[float] = None
    start_date: Optional[datetime] = None
    start_date_local: Optional[datetime] = None
    time_zone: Optional[str] = None
    achievement_count: int = 0
    kudos_count: int = 0
    comment_count: int = 0
    athlete_count: int = 1
    photo_count: int = 0
    total_photo_count: int = 0
    trainer: bool = False
    commute: bool = False
    manual: bool = False
    private: bool = False
    flagged: bool = False
    average_speed: Optional[float] = None
    max_speed: Optional[float] = None
    calories: Optional[float] = None
    has_kudoed: bool = False
    kilo_joules: Optional[float] = None
    average_power: Optional[float] = None
    max_power: Optional[float] = None
    device_watts: bool = False
    has_heart_rate: bool = False
    average_heart_rate: Optional[float] = None
    max_heart_rate: Optional[float] = None

class StoredActivity(ActivityRecord):
    """Activity row as returned by the store."""
    id: int
    created_at: Optional[datetime] = None

class Token(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    refresh_token: str
    access_token: Optional[str] = None
    expires_at: datetime
    updated_at: Optional[datetime] = None

class Athlete(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    user_id: str
    username: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    sex: Optional[str] = None
    premium: Optional[bool] = None
    summit: Optional[bool] = None
    profile_medium: Optional[str] = None
    profile: Optional[str] = None
    weight: Optional[float] = None
    ftp: Optional[int] = None
    measurement_preference: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class AthleteStats(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    user_id: str
    biggest_ride_distance: Optional[float] = None
    biggest_climb_elevation_gain: Optional[float] = None
    recent_ride_totals: Optional[dict[str, Any]] = None
    recent_run_totals: Optional[dict[str, Any]] = None
    recent_swim_totals: Optional[dict[str, Any]] = None
    ytd_ride_totals: Optional[dict[str, Any]] = None
    ytd_run_totals: Optional[dict[str, Any]] = None
    ytd_swim_totals: Optional[dict[str, Any]] = None
    all_ride_totals: Optional[dict[str, Any]] = None
    all_run_totals: Optional[dict[str, Any]] = None
    all_swim_totals: Optional[dict[str, Any]] = None
    updated_at: Optional[datetime] = None

class Session(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    session_id: str
    user_id: str
    auth_id: str
    created_at: Optional[datetime] = None

class Map(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    map_id: Optional[str] = None
    activity_id: Optional[str] = None
    summary_polyline: Optional[str] = None
    polyline: Optional[str] = None
    resource_state: Optional[int] = None
    created_at: Optional[datetime] = None
