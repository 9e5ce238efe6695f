#!/usr/bin/env python3
"""
Fill an empty data directory with a demo coach, players and one team.

Usage:
  python scripts/seed_demo.py [--data-dir ./data] [--players 5]
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import timedelta

from teamhub.core.config import get_settings
from teamhub.core.log import configure_logging
from teamhub.core.utils import utcnow
from teamhub.repositories.json_storage import JsonFileStore
from teamhub.services.storage_service import EntityStorage

DEMO_PASSWORD = "password123"


async def seed(storage: EntityStorage, players: int) -> None:
    if await storage.get_all_users():
        raise SystemExit("Data directory already has users; refusing to seed")
    coach = await storage.create_user(
        {"username": "coach", "password": DEMO_PASSWORD, "full_name": "Demo Coach", "role": "coach"}
    )
    team = await storage.create_team(
        {"name": "Demo FC", "division": "Amateur", "season_year": str(utcnow().year), "created_by_id": coach.id}
    )
    await storage.create_team_member({"team_id": team.id, "user_id": coach.id, "role": "coach"})
    for number in range(1, players + 1):
        player = await storage.create_user(
            {
                "username": f"player{number}",
                "password": DEMO_PASSWORD,
                "full_name": f"Player {number}",
                "jersey_number": number,
            }
        )
        await storage.create_team_member({"team_id": team.id, "user_id": player.id})

    now = utcnow()
    await storage.create_match(
        {
            "team_id": team.id,
            "opponent_name": "Rivals United",
            "match_date": now + timedelta(days=7),
            "location": "Home Ground",
            "is_home": True,
        }
    )
    await storage.create_event(
        {
            "team_id": team.id,
            "title": "Weekly training",
            "type": "training",
            "start_time": now + timedelta(days=2),
            "end_time": now + timedelta(days=2, hours=2),
            "location": "Training pitch",
            "created_by_id": coach.id,
        }
    )
    await storage.create_announcement(
        {"team_id": team.id, "title": "Welcome", "content": "Season starts soon!", "created_by_id": coach.id}
    )
    print("OK: demo data created")
    print(f"  Team: {team.name} (join code {team.join_code})")
    print(f"  Users: coach + {players} players, password '{DEMO_PASSWORD}'")


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed demo data into the JSON store")
    ap.add_argument("--data-dir", help="Data directory (default: DATA_DIR or ./data)")
    ap.add_argument("--players", type=int, default=5, help="Number of demo players")
    args = ap.parse_args()

    settings = get_settings()
    configure_logging(settings)
    storage = EntityStorage(
        JsonFileStore(args.data_dir or settings.data_dir),
        join_code_length=settings.join_code_length,
    )
    asyncio.run(seed(storage, max(0, args.players)))


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
