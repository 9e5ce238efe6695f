"""
Domain records persisted by the entity store.

Every record is flat: references to other records (team_id, user_id, ...) are
plain integers with no cascade. Timestamps are timezone-aware datetimes in
memory and ISO-8601 text on disk.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from functools import lru_cache
from typing import Any, Mapping, Optional

DEFAULT_ROLE = "player"
DEFAULT_AVATAR = "/default-avatar.png"
DEFAULT_TEAM_LOGO = "/default-team-logo.png"
DEFAULT_MATCH_STATUS = "scheduled"
DEFAULT_MATCH_TYPE = "friendly"
DEFAULT_ATTENDANCE_STATUS = "pending"
DEFAULT_INVITATION_STATUS = "pending"
DEFAULT_GOAL_TYPE = "regular"
DEFAULT_EVENT_TYPE = "other"
DEFAULT_CARD_TYPE = "yellow"

ROLES = ("admin", "coach", "player")
MATCH_STATUSES = ("scheduled", "completed", "cancelled")
EVENT_TYPES = ("training", "match", "meeting", "other")
ATTENDANCE_STATUSES = ("confirmed", "declined", "pending")
INVITATION_STATUSES = ("pending", "accepted", "declined")
GOAL_TYPES = ("regular", "penalty", "free_kick", "own_goal")
CARD_TYPES = ("yellow", "red", "second_yellow")


@lru_cache(maxsize=None)
def _field_names(cls: type) -> frozenset[str]:
    return frozenset(f.name for f in fields(cls))


@dataclass
class Entity:
    id: int

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return _field_names(cls)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        """Build from a stored dict, dropping keys this type does not know."""
        names = cls.field_names()
        return cls(**{key: value for key, value in record.items() if key in names})

    def to_record(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class User(Entity):
    username: str = ""
    password: str = ""
    full_name: str = ""
    role: str = DEFAULT_ROLE
    profile_picture: Optional[str] = DEFAULT_AVATAR
    position: Optional[str] = None
    jersey_number: Optional[int] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


@dataclass
class Team(Entity):
    name: str = ""
    logo: Optional[str] = DEFAULT_TEAM_LOGO
    division: Optional[str] = None
    season_year: Optional[str] = None
    created_by_id: Optional[int] = None
    join_code: Optional[str] = None


@dataclass
class TeamMember(Entity):
    team_id: int = 0
    user_id: int = 0
    joined_at: Optional[datetime] = None
    role: str = DEFAULT_ROLE


@dataclass
class Match(Entity):
    team_id: int = 0
    opponent_name: str = ""
    opponent_logo: Optional[str] = None
    match_date: Optional[datetime] = None
    location: str = ""
    is_home: bool = True
    goals_scored: Optional[int] = None
    goals_conceded: Optional[int] = None
    status: str = DEFAULT_MATCH_STATUS
    match_type: str = DEFAULT_MATCH_TYPE
    notes: Optional[str] = None


@dataclass
class Event(Entity):
    team_id: int = 0
    title: str = ""
    type: str = DEFAULT_EVENT_TYPE
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: str = ""
    description: Optional[str] = None
    created_by_id: Optional[int] = None


@dataclass
class Attendance(Entity):
    event_id: int = 0
    user_id: int = 0
    status: str = DEFAULT_ATTENDANCE_STATUS


@dataclass
class PlayerStat(Entity):
    user_id: int = 0
    match_id: int = 0
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    minutes_played: Optional[int] = None
    performance: int = 0


@dataclass
class Announcement(Entity):
    team_id: int = 0
    title: str = ""
    content: str = ""
    created_at: Optional[datetime] = None
    created_by_id: Optional[int] = None


@dataclass
class Invitation(Entity):
    team_id: int = 0
    email: str = ""
    role: str = DEFAULT_ROLE
    status: str = DEFAULT_INVITATION_STATUS
    created_at: Optional[datetime] = None
    created_by_id: Optional[int] = None


@dataclass
class MatchLineup(Entity):
    match_id: int = 0
    team_id: int = 0
    player_ids: list[int] = field(default_factory=list)
    bench_player_ids: list[int] = field(default_factory=list)
    formation: Optional[str] = None
    position_mapping: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None


@dataclass
class TeamLineup(Entity):
    team_id: int = 0
    formation: str = ""
    position_mapping: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class MatchSubstitution(Entity):
    match_id: int = 0
    player_in_id: int = 0
    player_out_id: int = 0
    minute: int = 0
    reason: Optional[str] = None


@dataclass
class MatchGoal(Entity):
    match_id: int = 0
    scorer_id: int = 0
    assist_id: Optional[int] = None
    minute: int = 0
    type: str = DEFAULT_GOAL_TYPE
    description: Optional[str] = None


@dataclass
class MatchCard(Entity):
    match_id: int = 0
    player_id: int = 0
    type: str = DEFAULT_CARD_TYPE
    minute: int = 0
    reason: Optional[str] = None


@dataclass
class MatchPhoto(Entity):
    match_id: int = 0
    url: str = ""
    caption: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    uploaded_by_id: Optional[int] = None


@dataclass
class LeagueClassification(Entity):
    team_id: int = 0
    external_team_name: str = ""
    points: int = 0
    position: Optional[int] = None
    games_played: int = 0
    games_won: int = 0
    games_drawn: int = 0
    games_lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
