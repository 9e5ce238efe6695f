"""
JSON-file persistence adapter.

One file per entity type under the configured data directory, each holding a
JSON array of flat objects. The whole collection is rewritten on every save.
Read and write failures are logged and swallowed; callers always get a list
back from load_data and a bool back from save_data.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from teamhub.core.utils import json_default, parse_datetime
from teamhub.repositories.results import StorageUnavailable

logger = logging.getLogger(__name__)

DATA_FILES: dict[str, str] = {
    "users": "users.json",
    "teams": "teams.json",
    "team_members": "team_members.json",
    "matches": "matches.json",
    "events": "events.json",
    "attendance": "attendance.json",
    "player_stats": "player_stats.json",
    "announcements": "announcements.json",
    "invitations": "invitations.json",
    "match_lineups": "match_lineups.json",
    "team_lineups": "team_lineups.json",
    "match_substitutions": "match_substitutions.json",
    "match_goals": "match_goals.json",
    "match_cards": "match_cards.json",
    "match_photos": "match_photos.json",
    "league_classification": "league_classification.json",
}

# Fields stored as ISO-8601 text and rehydrated into datetimes on load.
DATE_FIELDS: dict[str, tuple[str, ...]] = {
    "users": (),
    "teams": (),
    "team_members": ("joined_at",),
    "matches": ("match_date",),
    "events": ("start_time", "end_time"),
    "attendance": (),
    "player_stats": (),
    "announcements": ("created_at",),
    "invitations": ("created_at",),
    "match_lineups": ("created_at",),
    "team_lineups": ("created_at", "updated_at"),
    "match_substitutions": (),
    "match_goals": (),
    "match_cards": (),
    "match_photos": ("uploaded_at",),
    "league_classification": ("created_at", "updated_at"),
}


class JsonFileStore:
    """Reads and writes entity collections as JSON arrays in ``data_dir``."""

    def __init__(self, data_dir: str | os.PathLike[str]) -> None:
        self.data_dir = Path(data_dir)
        self._errors: dict[str, StorageUnavailable] = {}

    def init_data_directory(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, entity_type: str) -> Path:
        return self.data_dir / DATA_FILES[entity_type]

    def last_error(self, entity_type: str) -> Optional[StorageUnavailable]:
        return self._errors.get(entity_type)

    def _fail(self, entity_type: str, operation: str, exc: BaseException) -> None:
        self._errors[entity_type] = StorageUnavailable(entity_type, operation, str(exc))

    # -------------------------- load --------------------------
    def load_data(self, entity_type: str) -> list[dict[str, Any]]:
        path = self.path_for(entity_type)
        if not path.exists():
            self._errors.pop(entity_type, None)
            return []
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.error("Error loading %s data from %s: %s", entity_type, path, exc)
            self._fail(entity_type, "load", exc)
            return []
        self._errors.pop(entity_type, None)
        if not isinstance(data, list):
            logger.warning("Ignoring %s data: expected a JSON array, got %s", entity_type, type(data).__name__)
            self._fail(entity_type, "load", ValueError(f"expected a JSON array, got {type(data).__name__}"))
            return []
        records = [item for item in data if isinstance(item, dict)]
        if len(records) != len(data):
            logger.warning("Skipped %d non-object entries in %s", len(data) - len(records), path)
        return [self.convert_dates(entity_type, item) for item in records]

    def convert_dates(self, entity_type: str, item: Mapping[str, Any]) -> dict[str, Any]:
        converted = dict(item)
        for field in DATE_FIELDS[entity_type]:
            value = converted.get(field)
            if value is None:
                continue
            try:
                converted[field] = parse_datetime(value)
            except ValueError:
                logger.warning("Unparsable %s.%s value %r dropped", entity_type, field, value)
                converted[field] = None
        return converted

    # -------------------------- save --------------------------
    def save_data(self, entity_type: str, records: Iterable[dict[str, Any]]) -> bool:
        path = self.path_for(entity_type)
        tmp_path = None
        try:
            payload = json.dumps(list(records), indent=2, ensure_ascii=False, default=json_default)
            self.init_data_directory()
            fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), prefix=f".{path.stem}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving %s data to %s: %s", entity_type, path, exc)
            self._fail(entity_type, "save", exc)
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
            return False
        self._errors.pop(entity_type, None)
        return True
