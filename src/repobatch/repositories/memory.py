"""Dictionary backed record store."""

from __future__ import annotations

import copy
from typing import Any

import structlog

from ..domain.keys import read_key, resolve_key_field
from ..exceptions import KeyResolutionError, ensure_absent, ensure_found

logger = structlog.get_logger(__name__)


class InMemoryRecordStore:
    """Keep snapshots of one entity type in process memory.

    Entities are deep-copied on the way in and on the way out, so mutating an
    object after ``add`` or after ``get`` never changes stored state. With
    ``generate_keys`` enabled an entity added with a ``None`` key receives the
    next integer key and the key is written back onto the object passed to
    ``add``. For batched adds that object is the snapshot taken at enqueue
    time, not the caller's.
    """

    def __init__(
        self,
        entity_type: type,
        *,
        key_field: str | None = None,
        generate_keys: bool = True,
    ) -> None:
        self.entity_type = entity_type
        self.key_field = resolve_key_field(entity_type, key_field)
        self.generate_keys = generate_keys
        self._records: dict[Any, Any] = {}

    @property
    def name(self) -> str:
        return self.entity_type.__name__

    def key_of(self, entity: Any) -> Any:
        return read_key(entity, self.key_field)

    def snapshot(self, entity: Any) -> Any:
        return copy.deepcopy(entity)

    def get(self, key: Any) -> Any | None:
        record = self._records.get(key)
        return copy.deepcopy(record) if record is not None else None

    def get_all(self) -> list[Any]:
        return [copy.deepcopy(record) for record in self._records.values()]

    def contains(self, key: Any) -> bool:
        return key in self._records

    def add(self, entity: Any) -> None:
        key = self.key_of(entity)
        if key is None:
            key = self._assign_key(entity)
        ensure_absent(self._records.get(key), entity=self.name, identifier=key)
        self._records[key] = copy.deepcopy(entity)
        logger.debug("record_added", store=self.name, key=key)

    def update(self, entity: Any) -> None:
        key = self.key_of(entity)
        ensure_found(self._records.get(key), entity=self.name, identifier=key)
        self._records[key] = copy.deepcopy(entity)
        logger.debug("record_updated", store=self.name, key=key)

    def delete(self, key: Any) -> None:
        ensure_found(self._records.get(key), entity=self.name, identifier=key)
        del self._records[key]
        logger.debug("record_deleted", store=self.name, key=key)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def _assign_key(self, entity: Any) -> int:
        if not self.generate_keys:
            raise KeyResolutionError(f"{self.name}: '{self.key_field}' is required")
        numeric = [key for key in self._records if isinstance(key, int)]
        key = max(numeric, default=0) + 1
        setattr(entity, self.key_field, key)
        return key


__all__ = ["InMemoryRecordStore"]
