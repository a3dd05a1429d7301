from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel, create_engine, Session

from . import config


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItineraryType(str, Enum):
    DAILY = "daily"
    GUIDE = "guide"


class User(SQLModel, table=True):
    id: str = Field(primary_key=True)
    email: str = Field(index=True)
    display_name: Optional[str] = None
    avatar_color: str = config.DEFAULT_AVATAR_COLOR
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Itinerary(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    title: str
    description: Optional[str] = None
    destination: Optional[str] = None
    slug: str = Field(index=True, unique=True)
    is_public: bool = True
    type: ItineraryType = Field(default=ItineraryType.DAILY)
    budget_level: Optional[int] = None
    cover_photo_url: Optional[str] = None
    stashed_from_id: Optional[int] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Day(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    itinerary_id: int = Field(foreign_key="itinerary.id", index=True)
    day_number: int
    date: Optional[str] = None
    title: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Activity(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    day_id: int = Field(foreign_key="day.id", index=True)
    title: str
    location: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TripTag(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    itinerary_id: int = Field(foreign_key="itinerary.id", index=True)
    tag: str
    created_at: datetime = Field(default_factory=utcnow)


class SlugReservation(SQLModel, table=True):
    slug: str = Field(primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)


def _create_engine():
    return create_engine(
        f"sqlite:///{config.DB_PATH}",
        connect_args={"check_same_thread": False},
    )


engine = _create_engine()


def reset_engine() -> None:
    global engine
    engine.dispose()
    engine = _create_engine()


def init_db() -> None:
    config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)
