"""Registry wiring entity types to record store factories.

Each entity type gets one store, created lazily by its factory on first use
and shared by every repository the registry builds for that type. Stores are
shared state: two repositories over the same entity type see the same data
and join a transaction scope through the same batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Protocol, runtime_checkable

from .core.config import RepositorySettings
from .exceptions import StoreNotRegisteredError
from .infrastructure.record_store import RecordStore
from .repositories.memory import InMemoryRecordStore
from .repositories.sqlalchemy.store import SqlAlchemyRecordStore
from .repository import Repository


@runtime_checkable
class StoreFactory(Protocol):
    """Factory building the record store for one entity type."""

    def __call__(self, entity_type: type) -> RecordStore:
        """Return an initialized record store."""


@dataclass(slots=True)
class StoreRegistry:
    """Map entity types to store factories and cache the built stores."""

    settings: RepositorySettings = field(default_factory=RepositorySettings.build_default)
    factories: Dict[type, StoreFactory] = field(default_factory=dict)
    stores: Dict[type, RecordStore] = field(default_factory=dict)

    def register(self, entity_type: type, factory: StoreFactory) -> None:
        """Register ``factory`` for ``entity_type``, dropping a cached store."""

        self.factories[entity_type] = factory
        self.stores.pop(entity_type, None)

    def register_memory(self, entity_type: type, **options: Any) -> None:
        options.setdefault("generate_keys", self.settings.generate_keys)
        self.register(entity_type, lambda kind: InMemoryRecordStore(kind, **options))

    def register_sqlalchemy(self, entity_type: type, session_factory: Any, **options: Any) -> None:
        self.register(
            entity_type,
            lambda kind: SqlAlchemyRecordStore(kind, session_factory, **options),
        )

    def resolve(self, entity_type: type) -> RecordStore:
        """Return the store of ``entity_type``, building it on first use."""

        store = self.stores.get(entity_type)
        if store is None:
            try:
                factory = self.factories[entity_type]
            except KeyError:
                raise StoreNotRegisteredError(
                    f"no store registered for {entity_type.__name__}"
                ) from None
            store = factory(entity_type)
            self.stores[entity_type] = store
        return store

    def repository(self, entity_type: type) -> Repository[Any]:
        return Repository(self.resolve(entity_type))

    def snapshot(self) -> Mapping[type, StoreFactory]:
        """Immutable snapshot of registered factories."""

        return dict(self.factories)


__all__ = ["StoreFactory", "StoreRegistry"]
