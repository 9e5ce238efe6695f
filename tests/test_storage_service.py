"""
EntityStorage facade: password rule, cross-manager queries, configuration.
"""
from __future__ import annotations

import asyncio
import re
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from teamhub.core import config as core_config  # noqa: E402
from teamhub.core.security import hash_password  # noqa: E402
from teamhub.repositories.json_storage import JsonFileStore  # noqa: E402
from teamhub.repositories.results import NotFound, StorageUnavailable  # noqa: E402
from teamhub.services.storage_service import EntityStorage  # noqa: E402

run = asyncio.run
HASH_FORMAT = re.compile(r"[0-9a-f]{128}\.[0-9a-f]{32}")


@pytest.fixture()
def storage(tmp_path):
    return EntityStorage(JsonFileStore(tmp_path / "data"))


def test_constructor_creates_data_directory(tmp_path):
    EntityStorage(JsonFileStore(tmp_path / "fresh"))
    assert (tmp_path / "fresh").is_dir()


def test_plain_password_is_hashed(storage):
    user = run(storage.create_user({"username": "ana", "password": "secret123", "full_name": "Ana"}))
    assert user.password != "secret123"
    assert HASH_FORMAT.fullmatch(user.password)


def test_prehashed_password_is_stored_verbatim(storage):
    hashed = hash_password("secret123")
    user = run(storage.create_user({"username": "bia", "password": hashed, "full_name": "Bia"}))
    assert user.password == hashed


def test_create_user_does_not_mutate_input(storage):
    data = {"username": "ana", "password": "secret123", "full_name": "Ana"}
    run(storage.create_user(data))
    assert data["password"] == "secret123"


def test_update_user_hashes_new_password(storage):
    user = run(storage.create_user({"username": "ana", "password": "secret123", "full_name": "Ana"}))
    updated = run(storage.update_user(user.id, {"password": "another456"}))
    assert HASH_FORMAT.fullmatch(updated.password)
    assert run(storage.verify_user_password("ana", "another456")) == updated
    assert run(storage.verify_user_password("ana", "secret123")) is None


def test_verify_user_password_unknown_user(storage):
    assert run(storage.verify_user_password("ghost", "whatever")) is None


def test_teams_by_user_follow_memberships(storage):
    lions = run(storage.create_team({"name": "Lions"}))
    tigers = run(storage.create_team({"name": "Tigers"}))
    run(storage.create_team({"name": "Bears"}))
    run(storage.create_team_member({"team_id": lions.id, "user_id": 1}))
    run(storage.create_team_member({"team_id": tigers.id, "user_id": 1, "role": "coach"}))
    run(storage.create_team_member({"team_id": tigers.id, "user_id": 2}))

    assert [t.name for t in run(storage.get_teams_by_user_id(1))] == ["Lions", "Tigers"]
    assert [t.name for t in run(storage.get_teams_by_user_id(3))] == []
    assert run(storage.get_team_member(tigers.id, 1)).role == "coach"


def test_team_defaults_through_facade(storage):
    team = run(storage.create_team({"name": "Lions"}))
    member = run(storage.create_team_member({"team_id": team.id, "user_id": 1}))
    assert team.logo == "/default-team-logo.png"
    assert member.role == "player"
    assert run(storage.get_team_by_join_code(team.join_code)) == team


def test_upcoming_events_scenario(storage):
    now = datetime.now(timezone.utc)
    for days in (1, 3, -1):
        run(storage.create_event({"team_id": 7, "title": f"d{days}", "type": "training", "start_time": now + timedelta(days=days)}))
    events = run(storage.get_upcoming_events(7, 5))
    assert [e.title for e in events] == ["d1", "d3"]


def test_state_survives_a_new_facade(tmp_path):
    first = EntityStorage(JsonFileStore(tmp_path))
    team = run(first.create_team({"name": "Lions"}))
    doomed = run(first.create_team({"name": "Bears"}))
    match = run(first.create_match({"team_id": team.id, "opponent_name": "Rivals", "match_date": "2024-10-05T15:00:00Z", "location": "Away", "is_home": False}))
    run(first.delete_team(doomed.id))

    second = EntityStorage(JsonFileStore(tmp_path))
    assert run(second.get_team(doomed.id)) is None
    assert run(second.get_team(team.id)) == team
    assert run(second.get_match(match.id)) == match
    assert run(second.create_team({"name": "Tigers"})).id == team.id + 1


def test_lookup_exposes_richer_result(storage, tmp_path):
    assert isinstance(run(storage.lookup("matches", 1)), NotFound)
    with pytest.raises(KeyError):
        run(storage.lookup("store", 1))

    (tmp_path / "broken").mkdir()
    (tmp_path / "broken" / "events.json").write_text("nope", encoding="utf-8")
    broken = EntityStorage(JsonFileStore(tmp_path / "broken"))
    assert run(broken.get_event(1)) is None
    assert isinstance(run(broken.lookup("events", 1)), StorageUnavailable)


def test_from_settings_reads_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "configured"))
    monkeypatch.setenv("JOIN_CODE_LENGTH", "4")
    core_config.get_settings.cache_clear()
    try:
        storage = EntityStorage.from_settings()
        team = run(storage.create_team({"name": "Lions"}))
    finally:
        core_config.get_settings.cache_clear()
    assert len(team.join_code) == 4
    assert (tmp_path / "configured" / "teams.json").exists()


def test_dated_records_reload_with_equal_dates(tmp_path):
    first = EntityStorage(JsonFileStore(tmp_path))
    start = datetime(2030, 3, 1, 18, 30, 15, tzinfo=timezone.utc)
    saved = {
        "team_member": run(first.create_team_member({"team_id": 1, "user_id": 2})),
        "match": run(first.create_match({"team_id": 1, "opponent_name": "Rivals", "match_date": start, "location": "Home"})),
        "event": run(first.create_event({"team_id": 1, "title": "Drill", "type": "training", "start_time": start, "end_time": start + timedelta(hours=2)})),
        "announcement": run(first.create_announcement({"team_id": 1, "title": "Hi", "content": "Welcome"})),
        "invitation": run(first.create_invitation({"team_id": 1, "email": "new@club.org"})),
        "match_lineup": run(first.create_match_lineup({"match_id": 1, "team_id": 1, "player_ids": [2]})),
        "team_lineup": run(first.create_team_lineup({"team_id": 1, "formation": "4-4-2"})),
        "match_photo": run(first.create_match_photo({"match_id": 1, "url": "/p.jpg"})),
        "league_row": run(first.create_league_classification({"team_id": 1, "external_team_name": "Rivals", "points": 3})),
    }

    second = EntityStorage(JsonFileStore(tmp_path))
    reloaded = {
        "team_member": run(second.get_team_member(1, 2)),
        "match": run(second.get_match(saved["match"].id)),
        "event": run(second.get_event(saved["event"].id)),
        "announcement": run(second.get_announcement(saved["announcement"].id)),
        "invitation": run(second.get_invitation(saved["invitation"].id)),
        "match_lineup": run(second.get_match_lineup(1)),
        "team_lineup": run(second.get_team_lineup(1)),
        "match_photo": run(second.get_match_photos(1))[0],
        "league_row": run(second.get_league_classification(1))[0],
    }
    assert reloaded == saved
    assert reloaded["event"].end_time - reloaded["event"].start_time == timedelta(hours=2)
    assert reloaded["team_lineup"].updated_at.tzinfo is not None


def test_schedule_queries_through_facade(storage):
    now = datetime.now(timezone.utc)
    past = run(storage.create_match({"team_id": 1, "opponent_name": "Old", "match_date": now - timedelta(days=7), "location": "Home"}))
    soon = run(storage.create_match({"team_id": 1, "opponent_name": "Soon", "match_date": now + timedelta(days=2), "location": "Away"}))
    run(storage.create_match({"team_id": 2, "opponent_name": "Other", "match_date": now + timedelta(days=1), "location": "Home"}))

    assert run(storage.get_recent_matches(1, 5)) == [soon, past]
    assert run(storage.get_upcoming_matches(1, 5)) == [soon]
    assert run(storage.get_recent_matches(1, 0)) == []

    older = run(storage.create_announcement({"team_id": 1, "title": "A", "content": "x"}))
    older = run(storage.update_announcement(older.id, {"created_at": now - timedelta(days=1)}))
    newer = run(storage.create_announcement({"team_id": 1, "title": "B", "content": "y"}))
    assert run(storage.get_recent_announcements(1, 1)) == [newer]
    assert run(storage.get_recent_announcements(1, 5)) == [newer, older]

    assert run(storage.delete_match(past.id)) is True
    assert run(storage.delete_match(past.id)) is False
    assert run(storage.get_matches(1)) == [soon]


def test_match_timeline_deletes_through_facade(storage):
    sub = run(storage.create_match_substitution({"match_id": 1, "player_in_id": 3, "player_out_id": 4, "minute": 60}))
    goal = run(storage.create_match_goal({"match_id": 1, "scorer_id": 3, "minute": 70}))
    card = run(storage.create_match_card({"match_id": 1, "player_id": 4, "minute": 20}))
    photo = run(storage.create_match_photo({"match_id": 1, "url": "/p.jpg"}))
    row = run(storage.create_league_classification({"team_id": 1, "external_team_name": "Rivals"}))

    assert run(storage.delete_match_substitution(sub.id)) is True
    assert run(storage.delete_match_goal(goal.id)) is True
    assert run(storage.delete_match_card(card.id)) is True
    assert run(storage.delete_match_photo(photo.id)) is True
    assert run(storage.delete_league_classification(row.id)) is True

    assert run(storage.get_match_substitutions(1)) == []
    assert run(storage.get_match_goals(1)) == []
    assert run(storage.get_match_cards(1)) == []
    assert run(storage.get_match_photos(1)) == []
    assert run(storage.get_league_classification(1)) == []
    assert run(storage.delete_match_goal(goal.id)) is False
