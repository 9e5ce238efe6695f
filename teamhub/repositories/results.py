"""Tagged lookup results for callers that need more than "found or None"."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NotFound:
    """The collection is readable and has no record with this id."""

    entity_type: str
    entity_id: Optional[int] = None


@dataclass(frozen=True)
class StorageUnavailable:
    """The durable file for this entity type could not be read or written."""

    entity_type: str
    operation: str
    message: str
    entity_id: Optional[int] = None
