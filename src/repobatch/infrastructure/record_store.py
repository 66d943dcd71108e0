"""Record store contract implemented by every backing store adapter."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RecordStore(Protocol):
    """Direct, non-transactional storage for one entity type.

    Every mutation is applied immediately and is visible to the next read.
    ``add`` raises :class:`~repobatch.exceptions.DuplicateKeyError` for a key
    already present; ``update`` and ``delete`` raise
    :class:`~repobatch.exceptions.NotFoundError` for an absent key. Stores do
    no locking of their own.
    """

    entity_type: type

    def key_of(self, entity: Any) -> Any:
        """Return the identity value of ``entity``."""

    def snapshot(self, entity: Any) -> Any:
        """Return a detached copy of ``entity`` for deferred replay."""

    def get(self, key: Any) -> Any | None:
        """Return the entity stored under ``key`` or ``None``."""

    def get_all(self) -> list[Any]:
        """Return every stored entity."""

    def contains(self, key: Any) -> bool:
        """Return whether ``key`` is stored."""

    def add(self, entity: Any) -> None:
        """Insert ``entity``."""

    def update(self, entity: Any) -> None:
        """Replace the stored entity that shares the key of ``entity``."""

    def delete(self, key: Any) -> None:
        """Remove the entity stored under ``key``."""
