"""Request bodies accepted by the JSON routers."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["admin", "coach", "player"]


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: Optional[Role] = None
    profile_picture: Optional[str] = None
    position: Optional[str] = None
    jersey_number: Optional[int] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    logo: Optional[str] = None
    division: Optional[str] = None
    season_year: Optional[str] = None
    created_by_id: Optional[int] = None


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    logo: Optional[str] = None
    division: Optional[str] = None
    season_year: Optional[str] = None


class MemberCreate(BaseModel):
    user_id: int
    role: Optional[Role] = None


class MemberUpdate(BaseModel):
    role: Role


class MatchCreate(BaseModel):
    opponent_name: str = Field(..., min_length=1)
    match_date: datetime
    location: str = Field(..., min_length=1)
    is_home: bool = True
    opponent_logo: Optional[str] = None
    goals_scored: Optional[int] = Field(None, ge=0)
    goals_conceded: Optional[int] = Field(None, ge=0)
    status: Optional[Literal["scheduled", "completed", "cancelled"]] = None
    match_type: Optional[str] = None
    notes: Optional[str] = None


class MatchUpdate(BaseModel):
    opponent_name: Optional[str] = None
    opponent_logo: Optional[str] = None
    match_date: Optional[datetime] = None
    location: Optional[str] = None
    is_home: Optional[bool] = None
    goals_scored: Optional[int] = Field(None, ge=0)
    goals_conceded: Optional[int] = Field(None, ge=0)
    status: Optional[Literal["scheduled", "completed", "cancelled"]] = None
    match_type: Optional[str] = None
    notes: Optional[str] = None


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    type: Literal["training", "match", "meeting", "other"]
    start_time: datetime
    end_time: Optional[datetime] = None
    location: str = Field(..., min_length=1)
    description: Optional[str] = None
    created_by_id: Optional[int] = None


class EventUpdate(BaseModel):
    title: Optional[str] = None
    type: Optional[Literal["training", "match", "meeting", "other"]] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    description: Optional[str] = None


class AttendanceCreate(BaseModel):
    user_id: int
    status: Optional[Literal["confirmed", "declined", "pending"]] = None


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    created_by_id: Optional[int] = None


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


def changes(payload: BaseModel) -> dict[str, Any]:
    """Only the fields the client actually sent."""
    return payload.model_dump(exclude_unset=True)
