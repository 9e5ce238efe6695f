"""
Generic in-memory entity collection backed by JsonFileStore.

The map loaded at construction is the source of truth for the lifetime of the
manager; every mutation rewrites the whole collection file. A failed write is
logged by the store and does not roll back the in-memory change.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar, Union

from teamhub.domain.entities import Entity
from teamhub.repositories.json_storage import DATE_FIELDS, JsonFileStore
from teamhub.repositories.results import NotFound, StorageUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Entity)
Builder = Callable[[Mapping[str, Any], int], T]
Predicate = Callable[[T], bool]
LookupResult = Union[T, NotFound, StorageUnavailable]


class EntityManager(Generic[T]):
    """CRUD over one entity type's map, keyed by integer id."""

    entity_type: str = ""
    entity_class: type[Entity] = Entity

    def __init__(
        self,
        store: JsonFileStore,
        entity_type: Optional[str] = None,
        entity_class: Optional[type[T]] = None,
    ) -> None:
        if entity_type:
            self.entity_type = entity_type
        if entity_class is not None:
            self.entity_class = entity_class
        if self.entity_type not in DATE_FIELDS:
            raise KeyError(f"Unknown entity type: {self.entity_type!r}")
        self.store = store
        self.entities: dict[int, T] = {}
        self.current_id = 1
        self.load()

    # -------------------------- reads --------------------------
    async def get(self, entity_id: int) -> Optional[T]:
        return self.entities.get(entity_id)

    async def get_all(self) -> list[T]:
        return list(self.entities.values())

    async def find(self, predicate: Predicate) -> list[T]:
        return [entity for entity in self.entities.values() if predicate(entity)]

    async def find_one(self, predicate: Predicate) -> Optional[T]:
        for entity in self.entities.values():
            if predicate(entity):
                return entity
        return None

    async def lookup(self, entity_id: int) -> LookupResult:
        """Like get, but tells a missing record apart from an unreadable file."""
        entity = self.entities.get(entity_id)
        if entity is not None:
            return entity
        error = self.storage_error
        if error is not None:
            return replace(error, entity_id=entity_id)
        return NotFound(self.entity_type, entity_id)

    @property
    def storage_error(self) -> Optional[StorageUnavailable]:
        return self.store.last_error(self.entity_type)

    # -------------------------- writes --------------------------
    async def create(self, data: Mapping[str, Any], build: Optional[Builder] = None) -> T:
        entity_id = self._next_id()
        values = self.coerce_dates(data)
        if build is not None:
            entity = build(values, entity_id)
        else:
            entity = self.entity_class.from_record({**values, "id": entity_id})
        self.entities[entity_id] = entity
        self.save()
        return entity

    async def update(self, entity_id: int, data: Mapping[str, Any]) -> Optional[T]:
        entity = self.entities.get(entity_id)
        if entity is None:
            return None
        changes = self.prepare_update(entity, self._known_fields(data))
        updated = replace(entity, **changes)
        self.entities[entity_id] = updated
        self.save()
        return updated

    async def delete(self, entity_id: int) -> bool:
        if self.entities.pop(entity_id, None) is None:
            return False
        self.save()
        return True

    async def delete_many(self, predicate: Predicate) -> int:
        doomed = [entity.id for entity in self.entities.values() if predicate(entity)]
        for entity_id in doomed:
            del self.entities[entity_id]
        self.save()
        return len(doomed)

    # -------------------------- hooks --------------------------
    def prepare_update(self, current: T, changes: dict[str, Any]) -> dict[str, Any]:
        """Adjust a validated change set before it is merged; subclasses extend."""
        return self.coerce_dates(changes)

    def coerce_dates(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return self.store.convert_dates(self.entity_type, data)

    # -------------------------- persistence --------------------------
    def load(self) -> bool:
        records = self.store.load_data(self.entity_type)
        if not records:
            return False
        self.entities.clear()
        max_id = 0
        for record in records:
            try:
                entity_id = int(record["id"])
                entity = self.entity_class.from_record({**record, "id": entity_id})
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed %s record %r: %s", self.entity_type, record, exc)
                continue
            self.entities[entity_id] = entity
            max_id = max(max_id, entity_id)
        self.current_id = max_id + 1
        logger.info("Loaded %d %s from storage", len(self.entities), self.entity_type)
        return True

    def save(self) -> bool:
        return self.store.save_data(self.entity_type, (entity.to_record() for entity in self.entities.values()))

    def _next_id(self) -> int:
        entity_id = self.current_id
        self.current_id += 1
        return entity_id

    def _known_fields(self, data: Mapping[str, Any]) -> dict[str, Any]:
        names = self.entity_class.field_names()
        known = {key: value for key, value in data.items() if key in names and key != "id"}
        ignored = sorted(key for key in data if key not in names)
        if ignored:
            logger.warning("Ignoring unknown %s fields on update: %s", self.entity_type, ", ".join(ignored))
        return known
