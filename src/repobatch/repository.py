"""Per-entity-type repository routing writes through transaction scopes."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from .infrastructure.record_store import RecordStore
from .transactions.batch import Batch
from .transactions.scope import TransactionScope, current_scope

T = TypeVar("T")

Predicate = Callable[[Any], bool]


class Repository(Generic[T]):
    """CRUD facade over a :class:`RecordStore`.

    Writes issued while a transaction scope is active are queued in the batch
    the scope keeps for this repository's store; otherwise they are applied to
    the store immediately. The scope is taken from the ``scope`` argument of
    the call, then from the repository, then from the execution context.

    Reads always go to the store, so queued writes stay invisible, including
    to this repository, until the scope commits.
    """

    def __init__(self, store: RecordStore, *, scope: TransactionScope | None = None) -> None:
        self.store = store
        self.scope = scope

    @property
    def entity_type(self) -> type:
        return self.store.entity_type

    # Writes ------------------------------------------------------------
    def add(self, entity: T, *, scope: TransactionScope | None = None) -> None:
        batch = self._batch_for(scope)
        if batch is None:
            self.store.add(entity)
        else:
            batch.add(entity)

    def add_many(self, entities: Iterable[T], *, scope: TransactionScope | None = None) -> None:
        for entity in entities:
            self.add(entity, scope=scope)

    def update(self, entity: T, *, scope: TransactionScope | None = None) -> None:
        batch = self._batch_for(scope)
        if batch is None:
            self.store.update(entity)
        else:
            batch.update(entity)

    def update_many(
        self, entities: Iterable[T], *, scope: TransactionScope | None = None
    ) -> None:
        for entity in entities:
            self.update(entity, scope=scope)

    def delete(self, entity_or_key: Any, *, scope: TransactionScope | None = None) -> None:
        """Delete by entity or by bare key."""

        batch = self._batch_for(scope)
        if batch is None:
            self.store.delete(self._key(entity_or_key))
        else:
            batch.delete(entity_or_key)

    def delete_many(
        self, entities_or_keys: Iterable[Any], *, scope: TransactionScope | None = None
    ) -> None:
        for item in entities_or_keys:
            self.delete(item, scope=scope)

    def begin_batch(self) -> Batch:
        """Return a standalone batch bound to this repository's store."""

        return Batch(self.store)

    # Reads -------------------------------------------------------------
    def get(self, key: Any) -> T | None:
        return self.store.get(key)

    def exists(self, key: Any) -> bool:
        return self.store.contains(key)

    def get_all(self) -> list[T]:
        return self.store.get_all()

    def find(self, predicate: Predicate) -> T | None:
        return next((entity for entity in self.store.get_all() if predicate(entity)), None)

    def find_all(self, predicate: Predicate) -> list[T]:
        return [entity for entity in self.store.get_all() if predicate(entity)]

    def count(self) -> int:
        return len(self.store.get_all())

    # Helpers -----------------------------------------------------------
    def _batch_for(self, scope: TransactionScope | None) -> Batch | None:
        active = scope or self.scope or current_scope()
        if active is None:
            return None
        return active.register_participant(self.store)

    def _key(self, entity_or_key: Any) -> Any:
        if isinstance(entity_or_key, self.store.entity_type):
            return self.store.key_of(entity_or_key)
        return entity_or_key


__all__ = ["Predicate", "Repository"]
