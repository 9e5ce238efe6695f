"""
Entity managers specialized per domain type.

Each manager adds lookup helpers expressed as find/find_one predicates and a
``build_defaults(data, id)`` builder that fills omitted fields before the
generic create stores the record. Derived "recent"/"upcoming" queries are a
linear scan per call; equal timestamps are ordered by id ascending.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

from teamhub.core.utils import generate_unique_join_code, parse_datetime, utcnow
from teamhub.domain.entities import (
    DEFAULT_ATTENDANCE_STATUS,
    DEFAULT_AVATAR,
    DEFAULT_EVENT_TYPE,
    DEFAULT_GOAL_TYPE,
    DEFAULT_INVITATION_STATUS,
    DEFAULT_MATCH_STATUS,
    DEFAULT_MATCH_TYPE,
    DEFAULT_ROLE,
    DEFAULT_TEAM_LOGO,
    Announcement,
    Attendance,
    Entity,
    Event,
    Invitation,
    LeagueClassification,
    Match,
    MatchCard,
    MatchGoal,
    MatchLineup,
    MatchPhoto,
    MatchSubstitution,
    PlayerStat,
    Team,
    TeamLineup,
    TeamMember,
    User,
)
from teamhub.repositories.entity_manager import EntityManager
from teamhub.repositories.json_storage import JsonFileStore

E = TypeVar("E", bound=Entity)


def most_recent(items: Iterable[E], key: Callable[[E], Optional[datetime]], limit: int) -> list[E]:
    """Newest first; records without a timestamp go last."""
    if limit <= 0:
        return []

    def sort_key(entity: E):
        value = key(entity)
        return (value is None, -value.timestamp() if value else 0.0, entity.id)

    return sorted(items, key=sort_key)[:limit]


def upcoming(
    items: Iterable[E],
    key: Callable[[E], Optional[datetime]],
    limit: int,
    now: Optional[datetime] = None,
) -> list[E]:
    """Strictly-future records, soonest first."""
    if limit <= 0:
        return []
    now = now or utcnow()
    future = [entity for entity in items if key(entity) is not None and key(entity) > now]
    return sorted(future, key=lambda entity: (key(entity), entity.id))[:limit]


def _or(data: Mapping[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value is None or value == "" else value


# -------------------------- people & teams --------------------------
class UserManager(EntityManager[User]):
    entity_type = "users"
    entity_class = User

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self.find_one(lambda user: user.username == username)

    async def get_by_email(self, email: str) -> Optional[User]:
        target = (email or "").strip().lower()
        if not target:
            return None
        return await self.find_one(lambda user: (user.email or "").strip().lower() == target)

    async def create(self, data: Mapping[str, Any], build=None) -> User:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> User:
        return User(
            id=entity_id,
            username=data.get("username") or "",
            password=data.get("password") or "",
            full_name=data.get("full_name") or "",
            role=_or(data, "role", DEFAULT_ROLE),
            profile_picture=_or(data, "profile_picture", DEFAULT_AVATAR),
            position=data.get("position"),
            jersey_number=data.get("jersey_number"),
            email=data.get("email"),
            phone_number=data.get("phone_number"),
        )


class TeamManager(EntityManager[Team]):
    entity_type = "teams"
    entity_class = Team

    def __init__(self, store: JsonFileStore, join_code_length: int = 6) -> None:
        self.join_code_length = join_code_length
        super().__init__(store)

    async def get_by_join_code(self, join_code: str) -> Optional[Team]:
        return await self.find_one(lambda team: team.join_code == join_code)

    async def create(self, data: Mapping[str, Any], build=None) -> Team:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> Team:
        join_code = data.get("join_code") or generate_unique_join_code(
            (team.join_code for team in self.entities.values() if team.join_code),
            self.join_code_length,
        )
        return Team(
            id=entity_id,
            name=data.get("name") or "",
            logo=_or(data, "logo", DEFAULT_TEAM_LOGO),
            division=data.get("division"),
            season_year=data.get("season_year"),
            created_by_id=data.get("created_by_id"),
            join_code=join_code,
        )


class TeamMemberManager(EntityManager[TeamMember]):
    entity_type = "team_members"
    entity_class = TeamMember

    async def get_by_team_id(self, team_id: int) -> list[TeamMember]:
        return await self.find(lambda member: member.team_id == team_id)

    async def get_by_team_and_user(self, team_id: int, user_id: int) -> Optional[TeamMember]:
        return await self.find_one(lambda member: member.team_id == team_id and member.user_id == user_id)

    async def get_by_user_id(self, user_id: int) -> list[TeamMember]:
        return await self.find(lambda member: member.user_id == user_id)

    async def create(self, data: Mapping[str, Any], build=None) -> TeamMember:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> TeamMember:
        return TeamMember(
            id=entity_id,
            team_id=data["team_id"],
            user_id=data["user_id"],
            joined_at=utcnow(),
            role=_or(data, "role", DEFAULT_ROLE),
        )


# -------------------------- matches & events --------------------------
class MatchManager(EntityManager[Match]):
    entity_type = "matches"
    entity_class = Match

    async def get_by_team_id(self, team_id: int) -> list[Match]:
        return await self.find(lambda match: match.team_id == team_id)

    async def get_recent_by_team_id(self, team_id: int, limit: int) -> list[Match]:
        return most_recent(await self.get_by_team_id(team_id), lambda match: match.match_date, limit)

    async def get_upcoming_by_team_id(self, team_id: int, limit: int, now: Optional[datetime] = None) -> list[Match]:
        return upcoming(await self.get_by_team_id(team_id), lambda match: match.match_date, limit, now)

    async def create(self, data: Mapping[str, Any], build=None) -> Match:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> Match:
        return Match(
            id=entity_id,
            team_id=data["team_id"],
            opponent_name=data.get("opponent_name") or "",
            opponent_logo=data.get("opponent_logo"),
            match_date=parse_datetime(data.get("match_date")),
            location=data.get("location") or "",
            is_home=bool(data.get("is_home", True)),
            goals_scored=data.get("goals_scored"),
            goals_conceded=data.get("goals_conceded"),
            status=_or(data, "status", DEFAULT_MATCH_STATUS),
            match_type=_or(data, "match_type", DEFAULT_MATCH_TYPE),
            notes=data.get("notes"),
        )


class EventManager(EntityManager[Event]):
    entity_type = "events"
    entity_class = Event

    async def get_by_team_id(self, team_id: int) -> list[Event]:
        return await self.find(lambda event: event.team_id == team_id)

    async def get_upcoming_by_team_id(self, team_id: int, limit: int, now: Optional[datetime] = None) -> list[Event]:
        return upcoming(await self.get_by_team_id(team_id), lambda event: event.start_time, limit, now)

    async def create(self, data: Mapping[str, Any], build=None) -> Event:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> Event:
        return Event(
            id=entity_id,
            team_id=data["team_id"],
            title=data.get("title") or "",
            type=_or(data, "type", DEFAULT_EVENT_TYPE),
            start_time=parse_datetime(data.get("start_time")),
            end_time=parse_datetime(data.get("end_time")),
            location=data.get("location") or "",
            description=data.get("description"),
            created_by_id=data.get("created_by_id"),
        )


class AttendanceManager(EntityManager[Attendance]):
    entity_type = "attendance"
    entity_class = Attendance

    async def get_by_event_id(self, event_id: int) -> list[Attendance]:
        return await self.find(lambda row: row.event_id == event_id)

    async def get_by_user_id(self, user_id: int) -> list[Attendance]:
        return await self.find(lambda row: row.user_id == user_id)

    async def get_by_event_and_user(self, event_id: int, user_id: int) -> Optional[Attendance]:
        return await self.find_one(lambda row: row.event_id == event_id and row.user_id == user_id)

    async def create(self, data: Mapping[str, Any], build=None) -> Attendance:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> Attendance:
        return Attendance(
            id=entity_id,
            event_id=data["event_id"],
            user_id=data["user_id"],
            status=_or(data, "status", DEFAULT_ATTENDANCE_STATUS),
        )


class PlayerStatManager(EntityManager[PlayerStat]):
    entity_type = "player_stats"
    entity_class = PlayerStat

    async def get_by_user_id(self, user_id: int) -> list[PlayerStat]:
        return await self.find(lambda stat: stat.user_id == user_id)

    async def get_by_match_id(self, match_id: int) -> list[PlayerStat]:
        return await self.find(lambda stat: stat.match_id == match_id)

    async def create(self, data: Mapping[str, Any], build=None) -> PlayerStat:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> PlayerStat:
        return PlayerStat(
            id=entity_id,
            user_id=data["user_id"],
            match_id=data["match_id"],
            goals=data.get("goals") or 0,
            assists=data.get("assists") or 0,
            yellow_cards=data.get("yellow_cards") or 0,
            red_cards=data.get("red_cards") or 0,
            minutes_played=data.get("minutes_played"),
            performance=data.get("performance") or 0,
        )


# -------------------------- communication --------------------------
class AnnouncementManager(EntityManager[Announcement]):
    entity_type = "announcements"
    entity_class = Announcement

    async def get_by_team_id(self, team_id: int) -> list[Announcement]:
        return await self.find(lambda announcement: announcement.team_id == team_id)

    async def get_recent_by_team_id(self, team_id: int, limit: int) -> list[Announcement]:
        return most_recent(await self.get_by_team_id(team_id), lambda item: item.created_at, limit)

    async def create(self, data: Mapping[str, Any], build=None) -> Announcement:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> Announcement:
        return Announcement(
            id=entity_id,
            team_id=data["team_id"],
            title=data.get("title") or "",
            content=data.get("content") or "",
            created_at=utcnow(),
            created_by_id=data.get("created_by_id"),
        )


class InvitationManager(EntityManager[Invitation]):
    entity_type = "invitations"
    entity_class = Invitation

    async def get_by_team_id(self, team_id: int) -> list[Invitation]:
        return await self.find(lambda invitation: invitation.team_id == team_id)

    async def get_pending_by_email(self, email: str) -> list[Invitation]:
        target = (email or "").strip().lower()
        return await self.find(
            lambda invitation: invitation.status == DEFAULT_INVITATION_STATUS
            and (invitation.email or "").strip().lower() == target
        )

    async def create(self, data: Mapping[str, Any], build=None) -> Invitation:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> Invitation:
        return Invitation(
            id=entity_id,
            team_id=data["team_id"],
            email=data.get("email") or "",
            role=_or(data, "role", DEFAULT_ROLE),
            status=DEFAULT_INVITATION_STATUS,
            created_at=utcnow(),
            created_by_id=data.get("created_by_id"),
        )


# -------------------------- lineups --------------------------
class MatchLineupManager(EntityManager[MatchLineup]):
    entity_type = "match_lineups"
    entity_class = MatchLineup

    async def get_by_match_id(self, match_id: int) -> Optional[MatchLineup]:
        return await self.find_one(lambda lineup: lineup.match_id == match_id)

    async def create(self, data: Mapping[str, Any], build=None) -> MatchLineup:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> MatchLineup:
        return MatchLineup(
            id=entity_id,
            match_id=data["match_id"],
            team_id=data["team_id"],
            player_ids=list(data.get("player_ids") or []),
            bench_player_ids=list(data.get("bench_player_ids") or []),
            formation=data.get("formation"),
            position_mapping=data.get("position_mapping"),
            created_at=utcnow(),
        )


class TeamLineupManager(EntityManager[TeamLineup]):
    entity_type = "team_lineups"
    entity_class = TeamLineup

    async def get_by_team_id(self, team_id: int) -> Optional[TeamLineup]:
        return await self.find_one(lambda lineup: lineup.team_id == team_id)

    async def create(self, data: Mapping[str, Any], build=None) -> TeamLineup:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> TeamLineup:
        now = utcnow()
        return TeamLineup(
            id=entity_id,
            team_id=data["team_id"],
            formation=data.get("formation") or "",
            position_mapping=data.get("position_mapping"),
            created_at=now,
            updated_at=now,
        )

    def prepare_update(self, current: TeamLineup, changes: dict[str, Any]) -> dict[str, Any]:
        changes = super().prepare_update(current, changes)
        changes["updated_at"] = utcnow()
        return changes


# -------------------------- match timeline --------------------------
class MatchSubstitutionManager(EntityManager[MatchSubstitution]):
    entity_type = "match_substitutions"
    entity_class = MatchSubstitution

    async def get_by_match_id(self, match_id: int) -> list[MatchSubstitution]:
        rows = await self.find(lambda row: row.match_id == match_id)
        return sorted(rows, key=lambda row: (row.minute, row.id))


class MatchGoalManager(EntityManager[MatchGoal]):
    entity_type = "match_goals"
    entity_class = MatchGoal

    async def get_by_match_id(self, match_id: int) -> list[MatchGoal]:
        rows = await self.find(lambda row: row.match_id == match_id)
        return sorted(rows, key=lambda row: (row.minute, row.id))

    async def create(self, data: Mapping[str, Any], build=None) -> MatchGoal:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> MatchGoal:
        return MatchGoal(
            id=entity_id,
            match_id=data["match_id"],
            scorer_id=data["scorer_id"],
            assist_id=data.get("assist_id"),
            minute=data.get("minute") or 0,
            type=_or(data, "type", DEFAULT_GOAL_TYPE),
            description=data.get("description"),
        )


class MatchCardManager(EntityManager[MatchCard]):
    entity_type = "match_cards"
    entity_class = MatchCard

    async def get_by_match_id(self, match_id: int) -> list[MatchCard]:
        rows = await self.find(lambda row: row.match_id == match_id)
        return sorted(rows, key=lambda row: (row.minute, row.id))


class MatchPhotoManager(EntityManager[MatchPhoto]):
    entity_type = "match_photos"
    entity_class = MatchPhoto

    async def get_by_match_id(self, match_id: int) -> list[MatchPhoto]:
        rows = await self.find(lambda row: row.match_id == match_id)
        return sorted(rows, key=lambda row: (row.uploaded_at is None, row.uploaded_at.timestamp() if row.uploaded_at else 0.0, row.id))

    async def create(self, data: Mapping[str, Any], build=None) -> MatchPhoto:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> MatchPhoto:
        return MatchPhoto(
            id=entity_id,
            match_id=data["match_id"],
            url=data.get("url") or "",
            caption=data.get("caption"),
            uploaded_at=utcnow(),
            uploaded_by_id=data.get("uploaded_by_id"),
        )


class LeagueClassificationManager(EntityManager[LeagueClassification]):
    entity_type = "league_classification"
    entity_class = LeagueClassification

    async def get_by_team_id(self, team_id: int) -> list[LeagueClassification]:
        rows = await self.find(lambda row: row.team_id == team_id)
        return sorted(
            rows,
            key=lambda row: (row.position is None, row.position or 0, -row.points, row.id),
        )

    async def create(self, data: Mapping[str, Any], build=None) -> LeagueClassification:
        return await super().create(data, build or self.build_defaults)

    def build_defaults(self, data: Mapping[str, Any], entity_id: int) -> LeagueClassification:
        now = utcnow()
        return LeagueClassification(
            id=entity_id,
            team_id=data["team_id"],
            external_team_name=data.get("external_team_name") or "",
            points=data.get("points") or 0,
            position=data.get("position"),
            games_played=data.get("games_played") or 0,
            games_won=data.get("games_won") or 0,
            games_drawn=data.get("games_drawn") or 0,
            games_lost=data.get("games_lost") or 0,
            goals_for=data.get("goals_for") or 0,
            goals_against=data.get("goals_against") or 0,
            created_at=now,
            updated_at=now,
        )

    def prepare_update(self, current: LeagueClassification, changes: dict[str, Any]) -> dict[str, Any]:
        changes = super().prepare_update(current, changes)
        changes["updated_at"] = utcnow()
        return changes
