from datetime import datetime
from typing import Any, Optional
from sqlalchemy import BigInteger, Boolean, DateTime, Float, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass

class Activity(Base):
    """Activity model for database storage."""
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    external_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    upload_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    detail: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    distance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    moving_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    elapsed_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    high_elevation: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    low_elevation: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    total_elevation_gain: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    start_date_local: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    time_zone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    achievement_count: Mapped[int] = mapped_column(Integer, default=0)
    kudos_count: Mapped[int] = mapped_column(Integer, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, default=0)
    athlete_count: Mapped[int] = mapped_column(Integer, default=1)
    photo_count: Mapped[int] = mapped_column(Integer, default=0)
    total_photo_count: Mapped[int] = mapped_column(Integer, default=0)
    trainer: Mapped[bool] = mapped_column(Boolean, default=False)
    commute: Mapped[bool] = mapped_column(Boolean, default=False)
    manual: Mapped[bool] = mapped_column(Boolean, default=False)
    private: Mapped[bool] = mapped_column(Boolean, default=False)
    flagged: Mapped[bool] = mapped_column(Boolean, default=False)
    average_speed: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_speed: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    calories: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    has_kudoed: Mapped[bool] = mapped_column(Boolean, default=False)
    kilo_joules: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    average_power: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_power: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    device_watts: Mapped[bool] = mapped_column(Boolean, default=False)
    has_heart_rate: Mapped[bool] = mapped_column(Boolean, default=False)
    average_heart_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_heart_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

class Token(Base):
    """OAuth token pair, one row per user."""
    __tablename__ = "tokens"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    refresh_token: Mapped[str] = mapped_column(String)
    access_token: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

class Athlete(Base):
    """Athlete profile model for database storage."""
    __tablename__ = "athletes"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, unique=True)
    username: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    firstname: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    lastname: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    sex: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    premium: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    summit: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    profile_medium: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    profile: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ftp: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    measurement_preference: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

class AthleteStats(Base):
    """Aggregated athlete totals as reported by Strava."""
    __tablename__ = "athlete_stats"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, unique=True)
    biggest_ride_distance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    biggest_climb_elevation_gain: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    recent_ride_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    recent_run_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    recent_swim_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    ytd_ride_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    ytd_run_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    ytd_swim_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    all_ride_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    all_run_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    all_swim_totals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

class Session(Base):
    """Maps a browser session to a user and its auth identity."""
    __tablename__ = "sessions"

    session_id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String)
    auth_id: Mapped[str] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

class Profile(Base):
    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    auth_id: Mapped[str] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

class Map(Base):
    """Activity route polylines."""
    __tablename__ = "maps"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    map_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    activity_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    summary_polyline: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    polyline: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    resource_state: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
