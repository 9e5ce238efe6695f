"""
Storage facade: one object aggregating every entity manager.

EntityStorage is constructed explicitly (no module-level instance) so each app
or test can point it at its own data directory. Apart from forwarding, the
only rule living here is password hashing on user writes.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from teamhub.core.config import Settings, get_settings
from teamhub.core.security import hash_password, looks_hashed, verify_password
from teamhub.domain.entities import (
    Announcement,
    Attendance,
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
from teamhub.repositories.entity_manager import EntityManager, LookupResult
from teamhub.repositories.json_storage import JsonFileStore
from teamhub.repositories.managers import (
    AnnouncementManager,
    AttendanceManager,
    EventManager,
    InvitationManager,
    LeagueClassificationManager,
    MatchCardManager,
    MatchGoalManager,
    MatchLineupManager,
    MatchManager,
    MatchPhotoManager,
    MatchSubstitutionManager,
    PlayerStatManager,
    TeamLineupManager,
    TeamManager,
    TeamMemberManager,
    UserManager,
)

logger = logging.getLogger(__name__)

Data = Mapping[str, Any]


def _with_hashed_password(data: Data) -> dict[str, Any]:
    """Copy of ``data`` whose password is hashed unless it already is."""
    prepared = dict(data)
    password = prepared.get("password")
    if password and not looks_hashed(password):
        prepared["password"] = hash_password(password)
    return prepared


class EntityStorage:
    """Flattened CRUD surface over all entity managers."""

    def __init__(self, store: JsonFileStore, *, join_code_length: int = 6) -> None:
        self.store = store
        store.init_data_directory()
        self.users = UserManager(store)
        self.teams = TeamManager(store, join_code_length=join_code_length)
        self.team_members = TeamMemberManager(store)
        self.matches = MatchManager(store)
        self.events = EventManager(store)
        self.attendance = AttendanceManager(store)
        self.player_stats = PlayerStatManager(store)
        self.announcements = AnnouncementManager(store)
        self.invitations = InvitationManager(store)
        self.match_lineups = MatchLineupManager(store)
        self.team_lineups = TeamLineupManager(store)
        self.match_substitutions = MatchSubstitutionManager(store)
        self.match_goals = MatchGoalManager(store)
        self.match_cards = MatchCardManager(store)
        self.match_photos = MatchPhotoManager(store)
        self.league_classification = LeagueClassificationManager(store)
        logger.debug("Entity storage ready at %s", store.data_dir)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EntityStorage":
        settings = settings or get_settings()
        return cls(JsonFileStore(settings.data_dir), join_code_length=settings.join_code_length)

    def manager(self, entity_type: str) -> EntityManager:
        manager = getattr(self, entity_type, None)
        if not isinstance(manager, EntityManager):
            raise KeyError(f"Unknown entity type: {entity_type!r}")
        return manager

    async def lookup(self, entity_type: str, entity_id: int) -> LookupResult:
        """Entity, NotFound or StorageUnavailable for callers that need to tell them apart."""
        return await self.manager(entity_type).lookup(entity_id)

    # -------------------------- users --------------------------
    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return await self.users.get_by_username(username)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self.users.get_by_email(email)

    async def get_all_users(self) -> list[User]:
        return await self.users.get_all()

    async def create_user(self, data: Data) -> User:
        return await self.users.create(_with_hashed_password(data))

    async def update_user(self, user_id: int, data: Data) -> Optional[User]:
        return await self.users.update(user_id, _with_hashed_password(data))

    async def delete_user(self, user_id: int) -> bool:
        return await self.users.delete(user_id)

    async def verify_user_password(self, username: str, password: str) -> Optional[User]:
        user = await self.users.get_by_username(username)
        if user and verify_password(password, user.password):
            return user
        return None

    # -------------------------- teams --------------------------
    async def get_team(self, team_id: int) -> Optional[Team]:
        return await self.teams.get(team_id)

    async def get_teams(self) -> list[Team]:
        return await self.teams.get_all()

    async def get_teams_by_user_id(self, user_id: int) -> list[Team]:
        team_ids = {member.team_id for member in await self.team_members.get_by_user_id(user_id)}
        return await self.teams.find(lambda team: team.id in team_ids)

    async def get_team_by_join_code(self, join_code: str) -> Optional[Team]:
        return await self.teams.get_by_join_code(join_code)

    async def create_team(self, data: Data) -> Team:
        return await self.teams.create(data)

    async def update_team(self, team_id: int, data: Data) -> Optional[Team]:
        return await self.teams.update(team_id, data)

    async def delete_team(self, team_id: int) -> bool:
        return await self.teams.delete(team_id)

    # -------------------------- team members --------------------------
    async def get_team_members(self, team_id: int) -> list[TeamMember]:
        return await self.team_members.get_by_team_id(team_id)

    async def get_team_member(self, team_id: int, user_id: int) -> Optional[TeamMember]:
        return await self.team_members.get_by_team_and_user(team_id, user_id)

    async def get_user_memberships(self, user_id: int) -> list[TeamMember]:
        return await self.team_members.get_by_user_id(user_id)

    async def create_team_member(self, data: Data) -> TeamMember:
        return await self.team_members.create(data)

    async def update_team_member(self, member_id: int, data: Data) -> Optional[TeamMember]:
        return await self.team_members.update(member_id, data)

    async def delete_team_member(self, member_id: int) -> bool:
        return await self.team_members.delete(member_id)

    # -------------------------- matches --------------------------
    async def get_match(self, match_id: int) -> Optional[Match]:
        return await self.matches.get(match_id)

    async def get_matches(self, team_id: int) -> list[Match]:
        return await self.matches.get_by_team_id(team_id)

    async def get_recent_matches(self, team_id: int, limit: int) -> list[Match]:
        return await self.matches.get_recent_by_team_id(team_id, limit)

    async def get_upcoming_matches(self, team_id: int, limit: int) -> list[Match]:
        return await self.matches.get_upcoming_by_team_id(team_id, limit)

    async def create_match(self, data: Data) -> Match:
        return await self.matches.create(data)

    async def update_match(self, match_id: int, data: Data) -> Optional[Match]:
        return await self.matches.update(match_id, data)

    async def delete_match(self, match_id: int) -> bool:
        return await self.matches.delete(match_id)

    # -------------------------- events --------------------------
    async def get_event(self, event_id: int) -> Optional[Event]:
        return await self.events.get(event_id)

    async def get_events(self, team_id: int) -> list[Event]:
        return await self.events.get_by_team_id(team_id)

    async def get_upcoming_events(self, team_id: int, limit: int) -> list[Event]:
        return await self.events.get_upcoming_by_team_id(team_id, limit)

    async def create_event(self, data: Data) -> Event:
        return await self.events.create(data)

    async def update_event(self, event_id: int, data: Data) -> Optional[Event]:
        return await self.events.update(event_id, data)

    async def delete_event(self, event_id: int) -> bool:
        return await self.events.delete(event_id)

    # -------------------------- attendance --------------------------
    async def get_attendance(self, event_id: int) -> list[Attendance]:
        return await self.attendance.get_by_event_id(event_id)

    async def get_user_attendance(self, user_id: int) -> list[Attendance]:
        return await self.attendance.get_by_user_id(user_id)

    async def create_attendance(self, data: Data) -> Attendance:
        return await self.attendance.create(data)

    async def update_attendance(self, attendance_id: int, data: Data) -> Optional[Attendance]:
        return await self.attendance.update(attendance_id, data)

    # -------------------------- player stats --------------------------
    async def get_player_stats(self, user_id: int) -> list[PlayerStat]:
        return await self.player_stats.get_by_user_id(user_id)

    async def get_match_player_stats(self, match_id: int) -> list[PlayerStat]:
        return await self.player_stats.get_by_match_id(match_id)

    async def create_player_stat(self, data: Data) -> PlayerStat:
        return await self.player_stats.create(data)

    async def update_player_stat(self, stat_id: int, data: Data) -> Optional[PlayerStat]:
        return await self.player_stats.update(stat_id, data)

    # -------------------------- announcements --------------------------
    async def get_announcement(self, announcement_id: int) -> Optional[Announcement]:
        return await self.announcements.get(announcement_id)

    async def get_announcements(self, team_id: int) -> list[Announcement]:
        return await self.announcements.get_by_team_id(team_id)

    async def get_recent_announcements(self, team_id: int, limit: int) -> list[Announcement]:
        return await self.announcements.get_recent_by_team_id(team_id, limit)

    async def create_announcement(self, data: Data) -> Announcement:
        return await self.announcements.create(data)

    async def update_announcement(self, announcement_id: int, data: Data) -> Optional[Announcement]:
        return await self.announcements.update(announcement_id, data)

    async def delete_announcement(self, announcement_id: int) -> bool:
        return await self.announcements.delete(announcement_id)

    # -------------------------- invitations --------------------------
    async def get_invitation(self, invitation_id: int) -> Optional[Invitation]:
        return await self.invitations.get(invitation_id)

    async def get_invitations(self, team_id: int) -> list[Invitation]:
        return await self.invitations.get_by_team_id(team_id)

    async def create_invitation(self, data: Data) -> Invitation:
        return await self.invitations.create(data)

    async def update_invitation(self, invitation_id: int, data: Data) -> Optional[Invitation]:
        return await self.invitations.update(invitation_id, data)

    # -------------------------- lineups --------------------------
    async def get_match_lineup(self, match_id: int) -> Optional[MatchLineup]:
        return await self.match_lineups.get_by_match_id(match_id)

    async def create_match_lineup(self, data: Data) -> MatchLineup:
        return await self.match_lineups.create(data)

    async def update_match_lineup(self, lineup_id: int, data: Data) -> Optional[MatchLineup]:
        return await self.match_lineups.update(lineup_id, data)

    async def get_team_lineup(self, team_id: int) -> Optional[TeamLineup]:
        return await self.team_lineups.get_by_team_id(team_id)

    async def create_team_lineup(self, data: Data) -> TeamLineup:
        return await self.team_lineups.create(data)

    async def update_team_lineup(self, lineup_id: int, data: Data) -> Optional[TeamLineup]:
        return await self.team_lineups.update(lineup_id, data)

    # -------------------------- match timeline --------------------------
    async def get_match_substitutions(self, match_id: int) -> list[MatchSubstitution]:
        return await self.match_substitutions.get_by_match_id(match_id)

    async def create_match_substitution(self, data: Data) -> MatchSubstitution:
        return await self.match_substitutions.create(data)

    async def update_match_substitution(self, substitution_id: int, data: Data) -> Optional[MatchSubstitution]:
        return await self.match_substitutions.update(substitution_id, data)

    async def delete_match_substitution(self, substitution_id: int) -> bool:
        return await self.match_substitutions.delete(substitution_id)

    async def get_match_goals(self, match_id: int) -> list[MatchGoal]:
        return await self.match_goals.get_by_match_id(match_id)

    async def create_match_goal(self, data: Data) -> MatchGoal:
        return await self.match_goals.create(data)

    async def update_match_goal(self, goal_id: int, data: Data) -> Optional[MatchGoal]:
        return await self.match_goals.update(goal_id, data)

    async def delete_match_goal(self, goal_id: int) -> bool:
        return await self.match_goals.delete(goal_id)

    async def get_match_cards(self, match_id: int) -> list[MatchCard]:
        return await self.match_cards.get_by_match_id(match_id)

    async def create_match_card(self, data: Data) -> MatchCard:
        return await self.match_cards.create(data)

    async def update_match_card(self, card_id: int, data: Data) -> Optional[MatchCard]:
        return await self.match_cards.update(card_id, data)

    async def delete_match_card(self, card_id: int) -> bool:
        return await self.match_cards.delete(card_id)

    async def get_match_photos(self, match_id: int) -> list[MatchPhoto]:
        return await self.match_photos.get_by_match_id(match_id)

    async def create_match_photo(self, data: Data) -> MatchPhoto:
        return await self.match_photos.create(data)

    async def update_match_photo(self, photo_id: int, data: Data) -> Optional[MatchPhoto]:
        return await self.match_photos.update(photo_id, data)

    async def delete_match_photo(self, photo_id: int) -> bool:
        return await self.match_photos.delete(photo_id)

    # -------------------------- league classification --------------------------
    async def get_league_classification(self, team_id: int) -> list[LeagueClassification]:
        return await self.league_classification.get_by_team_id(team_id)

    async def create_league_classification(self, data: Data) -> LeagueClassification:
        return await self.league_classification.create(data)

    async def update_league_classification(self, row_id: int, data: Data) -> Optional[LeagueClassification]:
        return await self.league_classification.update(row_id, data)

    async def delete_league_classification(self, row_id: int) -> bool:
        return await self.league_classification.delete(row_id)
