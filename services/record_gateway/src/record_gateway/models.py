from datetime import datetime
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class ActivityPayload(BaseModel):
    """Inbound activity, in Strava export layout or activities column layout.

    Only the fields we can type-check up front are declared; everything
    else passes through to the normalizer untouched.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    upload_id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    description: Optional[str] = None
    distance: Optional[float] = None
    moving_time: Optional[int] = None
    elapsed_time: Optional[int] = None
    start_date: Optional[datetime] = None
    start_date_local: Optional[datetime] = None
    timezone: Optional[str] = None

class TokenUpsertRequest(BaseModel):
    user_id: RequiredStr
    refresh_token: RequiredStr
    access_token: RequiredStr
    expires_at: int = Field(gt=0, description="Access token expiry in epoch seconds")

class AccessTokenResponse(BaseModel):
    access_token: str
    expires_at: datetime

class RefreshTokenResponse(BaseModel):
    refresh_token: str
    expires_at: datetime

class AthleteUpdateRequest(BaseModel):
    """Subset of athlete profile columns; id and user_id are accepted but never written."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[Union[int, str]] = None
    user_id: Optional[str] = None
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

class AthleteStatsUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: Optional[Union[int, str]] = None
    user_id: Optional[str] = None
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

class MapCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    map_id: Optional[str] = None
    activity_id: Optional[str] = None
    summary_polyline: Optional[str] = None
    polyline: Optional[str] = None
    resource_state: Optional[int] = None

class SessionCreateRequest(BaseModel):
    session_id: RequiredStr
    user_id: RequiredStr
    auth_id: RequiredStr

class SessionUserResponse(BaseModel):
    user_id: str
    created_at: Optional[datetime] = None

class AuthIdResponse(BaseModel):
    auth_id: str
    created_at: Optional[datetime] = None

class ErrorResponse(BaseModel):
    error: str
