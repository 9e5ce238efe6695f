"""
Specialized managers: defaults and derived queries.
"""
from __future__ import annotations

import asyncio
import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from teamhub.domain.entities import (  # noqa: E402
    DEFAULT_AVATAR,
    DEFAULT_CARD_TYPE,
    DEFAULT_EVENT_TYPE,
    DEFAULT_TEAM_LOGO,
)
from teamhub.repositories import managers  # noqa: E402
from teamhub.repositories.json_storage import JsonFileStore  # noqa: E402

run = asyncio.run
T0 = datetime(2024, 9, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def store(tmp_path):
    s = JsonFileStore(tmp_path)
    s.init_data_directory()
    return s


def test_user_defaults_and_lookup(store):
    mgr = managers.UserManager(store)
    user = run(mgr.create({"username": "ana", "password": "x.y", "full_name": "Ana", "email": "Ana@Club.org"}))
    assert user.role == "player"
    assert user.profile_picture == DEFAULT_AVATAR
    assert run(mgr.get_by_username("ana")) == user
    assert run(mgr.get_by_email("ana@club.org ")) == user
    assert run(mgr.get_by_username("bia")) is None


def test_team_defaults_logo_and_join_code(store):
    mgr = managers.TeamManager(store, join_code_length=8)
    team = run(mgr.create({"name": "Lions", "created_by_id": 1}))
    assert team.logo == DEFAULT_TEAM_LOGO
    assert len(team.join_code) == 8
    assert run(mgr.get_by_join_code(team.join_code)) == team

    explicit = run(mgr.create({"name": "Tigers", "logo": "/t.png", "join_code": "TIGER1"}))
    assert explicit.logo == "/t.png"
    assert explicit.join_code == "TIGER1"


def test_join_codes_are_unique(store, monkeypatch):
    codes = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
    monkeypatch.setattr("teamhub.core.utils.generate_join_code", lambda length=6: next(codes))
    mgr = managers.TeamManager(store)
    first = run(mgr.create({"name": "A"}))
    second = run(mgr.create({"name": "B"}))
    assert (first.join_code, second.join_code) == ("AAAAAA", "BBBBBB")


def test_team_member_defaults_and_queries(store):
    mgr = managers.TeamMemberManager(store)
    before = datetime.now(timezone.utc)
    member = run(mgr.create({"team_id": 7, "user_id": 3}))
    run(mgr.create({"team_id": 8, "user_id": 3, "role": "coach"}))
    run(mgr.create({"team_id": 7, "user_id": 4}))

    assert member.role == "player"
    assert member.joined_at >= before
    assert [m.user_id for m in run(mgr.get_by_team_id(7))] == [3, 4]
    assert [m.team_id for m in run(mgr.get_by_user_id(3))] == [7, 8]
    assert run(mgr.get_by_team_and_user(8, 3)).role == "coach"
    assert run(mgr.get_by_team_and_user(8, 4)) is None


def test_match_defaults_and_date_coercion(store):
    mgr = managers.MatchManager(store)
    match = run(mgr.create({"team_id": 1, "opponent_name": "Rivals", "match_date": "2024-09-01T12:00:00Z", "location": "Home"}))
    assert match.status == "scheduled"
    assert match.match_type == "friendly"
    assert match.match_date == T0


def test_recent_matches_sorted_desc_limited_and_scoped(store):
    mgr = managers.MatchManager(store)
    for days, team in ((1, 7), (5, 7), (3, 7), (10, 9), (2, 7)):
        run(mgr.create({"team_id": team, "opponent_name": f"O{days}", "match_date": T0 + timedelta(days=days)}))
    recent = run(mgr.get_recent_by_team_id(7, 3))
    assert [m.opponent_name for m in recent] == ["O5", "O3", "O2"]
    assert all(m.team_id == 7 for m in recent)
    assert run(mgr.get_recent_by_team_id(7, 0)) == []


def test_recent_ties_broken_by_id(store):
    mgr = managers.AnnouncementManager(store)
    first = run(mgr.create({"team_id": 1, "title": "a", "content": "a"}))
    second = run(mgr.create({"team_id": 1, "title": "b", "content": "b"}))
    run(mgr.update(first.id, {"created_at": T0}))
    run(mgr.update(second.id, {"created_at": T0}))
    assert [a.id for a in run(mgr.get_recent_by_team_id(1, 5))] == [first.id, second.id]


def test_upcoming_events_only_future_ascending(store):
    mgr = managers.EventManager(store)
    now = datetime.now(timezone.utc)
    for label, delta in (("plus1", 1), ("plus3", 3), ("minus1", -1)):
        run(mgr.create({"team_id": 7, "title": label, "type": "training", "start_time": now + timedelta(days=delta)}))
    run(mgr.create({"team_id": 8, "title": "other-team", "type": "training", "start_time": now + timedelta(days=2)}))

    upcoming = run(mgr.get_upcoming_by_team_id(7, 5))
    assert [e.title for e in upcoming] == ["plus1", "plus3"]
    assert [e.title for e in run(mgr.get_upcoming_by_team_id(7, 1))] == ["plus1"]


def test_upcoming_excludes_events_starting_exactly_now(store):
    mgr = managers.EventManager(store)
    run(mgr.create({"team_id": 1, "title": "now", "type": "meeting", "start_time": T0}))
    run(mgr.create({"team_id": 1, "title": "later", "type": "meeting", "start_time": T0 + timedelta(minutes=1)}))
    assert [e.title for e in run(mgr.get_upcoming_by_team_id(1, 5, now=T0))] == ["later"]


def test_upcoming_matches(store):
    mgr = managers.MatchManager(store)
    run(mgr.create({"team_id": 1, "opponent_name": "past", "match_date": T0 - timedelta(days=1)}))
    run(mgr.create({"team_id": 1, "opponent_name": "next", "match_date": T0 + timedelta(days=1)}))
    assert [m.opponent_name for m in run(mgr.get_upcoming_by_team_id(1, 5, now=T0))] == ["next"]


def test_team_lineup_update_refreshes_updated_at(store):
    mgr = managers.TeamLineupManager(store)
    lineup = run(mgr.create({"team_id": 3, "formation": "4-4-2"}))
    assert lineup.created_at == lineup.updated_at
    updated = run(mgr.update(lineup.id, {"formation": "4-3-3"}))
    assert updated.formation == "4-3-3"
    assert updated.created_at == lineup.created_at
    assert updated.updated_at >= lineup.updated_at
    assert run(mgr.get_by_team_id(3)) == updated


def test_match_timeline_sorted_by_minute(store):
    goals = managers.MatchGoalManager(store)
    run(goals.create({"match_id": 1, "scorer_id": 10, "minute": 70}))
    run(goals.create({"match_id": 1, "scorer_id": 11, "minute": 12, "type": "penalty"}))
    run(goals.create({"match_id": 2, "scorer_id": 12, "minute": 5}))
    rows = run(goals.get_by_match_id(1))
    assert [(g.minute, g.type) for g in rows] == [(12, "penalty"), (70, "regular")]

    subs = managers.MatchSubstitutionManager(store)
    run(subs.create({"match_id": 1, "player_in_id": 5, "player_out_id": 6, "minute": 60}))
    run(subs.create({"match_id": 1, "player_in_id": 7, "player_out_id": 8, "minute": 46}))
    assert [s.minute for s in run(subs.get_by_match_id(1))] == [46, 60]


def test_attendance_and_stats_defaults(store):
    attendance = managers.AttendanceManager(store)
    row = run(attendance.create({"event_id": 4, "user_id": 2}))
    assert row.status == "pending"
    assert run(attendance.get_by_event_and_user(4, 2)) == row

    stats = managers.PlayerStatManager(store)
    stat = run(stats.create({"user_id": 2, "match_id": 9, "goals": 2}))
    assert (stat.goals, stat.assists, stat.red_cards, stat.performance) == (2, 0, 0, 0)
    assert run(stats.get_by_match_id(9)) == [stat]


def test_invitations_always_start_pending(store):
    mgr = managers.InvitationManager(store)
    invitation = run(mgr.create({"team_id": 1, "email": "new@club.org", "status": "accepted"}))
    assert invitation.status == "pending"
    assert invitation.role == "player"
    assert run(mgr.get_pending_by_email("NEW@club.org")) == [invitation]
    run(mgr.update(invitation.id, {"status": "accepted"}))
    assert run(mgr.get_pending_by_email("new@club.org")) == []


def test_league_classification_ordering(store):
    mgr = managers.LeagueClassificationManager(store)
    run(mgr.create({"team_id": 1, "external_team_name": "C", "points": 3}))
    run(mgr.create({"team_id": 1, "external_team_name": "A", "points": 9, "position": 1}))
    run(mgr.create({"team_id": 1, "external_team_name": "B", "points": 6, "position": 2}))
    assert [row.external_team_name for row in run(mgr.get_by_team_id(1))] == ["A", "B", "C"]


def test_match_lineup_and_photos(store):
    lineups = managers.MatchLineupManager(store)
    lineup = run(lineups.create({"match_id": 3, "team_id": 1, "player_ids": [1, 2, 3]}))
    assert lineup.bench_player_ids == []
    assert run(lineups.get_by_match_id(3)) == lineup

    photos = managers.MatchPhotoManager(store)
    photo = run(photos.create({"match_id": 3, "url": "/p.jpg", "uploaded_by_id": 1}))
    assert photo.uploaded_at is not None
    assert run(photos.get_by_match_id(3)) == [photo]


def _seed(store, entity_type, records):
    store.path_for(entity_type).write_text(json.dumps(records), encoding="utf-8")


def test_unreadable_stored_dates_sort_last_instead_of_failing(store):
    _seed(store, "matches", [
        {"id": 1, "team_id": 7, "opponent_name": "Soon", "match_date": "soon"},
        {"id": 2, "team_id": 7, "opponent_name": "Past", "match_date": "2024-05-01T10:00:00Z"},
    ])
    _seed(store, "events", [
        {"id": 1, "team_id": 7, "title": "tbd", "start_time": "tbd"},
        {"id": 2, "team_id": 7, "title": "later", "start_time": "2999-01-01T10:00:00Z"},
    ])
    _seed(store, "match_photos", [
        {"id": 1, "match_id": 3, "url": "/a.jpg", "uploaded_at": "yesterday"},
        {"id": 2, "match_id": 3, "url": "/b.jpg", "uploaded_at": "2024-05-01T10:00:00Z"},
    ])

    matches = managers.MatchManager(store)
    assert run(matches.get(1)).match_date is None
    assert [m.id for m in run(matches.get_recent_by_team_id(7, 5))] == [2, 1]
    assert run(matches.get_upcoming_by_team_id(7, 5)) == []

    events = managers.EventManager(store)
    assert [e.title for e in run(events.get_upcoming_by_team_id(7, 5))] == ["later"]

    photos = managers.MatchPhotoManager(store)
    assert [p.id for p in run(photos.get_by_match_id(3))] == [2, 1]


def test_unreadable_date_on_update_is_dropped(store):
    matches = managers.MatchManager(store)
    match = run(matches.create({"team_id": 7, "opponent_name": "X", "match_date": T0, "location": "Home"}))
    updated = run(matches.update(match.id, {"match_date": "whenever"}))
    assert updated.match_date is None
    assert run(matches.get_recent_by_team_id(7, 5)) == [updated]


def test_pending_invitations_tolerate_missing_email(store):
    _seed(store, "invitations", [
        {"id": 1, "team_id": 1, "email": None, "status": "pending"},
        {"id": 2, "team_id": 1, "email": "a@b.c", "status": "pending"},
    ])
    mgr = managers.InvitationManager(store)
    assert [i.id for i in run(mgr.get_pending_by_email("A@b.c"))] == [2]


def test_event_and_card_type_defaults(store):
    event = run(managers.EventManager(store).create({"team_id": 1, "title": "Meet", "start_time": T0}))
    assert event.type == DEFAULT_EVENT_TYPE == "other"
    card = run(managers.MatchCardManager(store).create({"match_id": 1, "player_id": 4, "minute": 30}))
    assert card.type == DEFAULT_CARD_TYPE == "yellow"
