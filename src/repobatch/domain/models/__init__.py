"""Value objects describing deferred mutations and transaction lifecycles.

Pending operations are recorded by batches and replayed verbatim, in
submission order, when the batch commits. Lifecycle enums make the state of
batches and scopes inspectable from tests and logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class OperationKind(str, Enum):
    """Kinds of mutations a batch can queue."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class BatchState(str, Enum):
    """Lifecycle of a :class:`~repobatch.transactions.batch.Batch`.

    A batch stays ``open`` while operations may be queued. A standalone batch
    returns to ``open`` after every commit so it can be reused; ``closed`` is
    reached when its context manager exits.
    """

    OPEN = "open"
    CLOSED = "closed"


class ScopeState(str, Enum):
    """Lifecycle of a transaction scope.

    ``created`` → ``active`` → one of the terminal states. ``failed`` is
    reached when the scope tried to commit and at least one batch raised.
    """

    CREATED = "created"
    ACTIVE = "active"
    COMMITTED = "committed"
    DISCARDED = "discarded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ScopeState.COMMITTED, ScopeState.DISCARDED, ScopeState.FAILED)


@dataclass(frozen=True, slots=True)
class PendingOperation:
    """Single deferred mutation against one record store.

    ``entity`` is set for ``add``/``update``; ``key`` always carries the
    identity the operation targets (``None`` for an add whose key is generated
    by the store).
    """

    kind: OperationKind
    key: Any = None
    entity: Any = None

    @classmethod
    def add(cls, entity: Any, key: Any = None) -> "PendingOperation":
        return cls(OperationKind.ADD, key=key, entity=entity)

    @classmethod
    def update(cls, entity: Any, key: Any = None) -> "PendingOperation":
        return cls(OperationKind.UPDATE, key=key, entity=entity)

    @classmethod
    def delete(cls, key: Any) -> "PendingOperation":
        return cls(OperationKind.DELETE, key=key)

    def describe(self) -> str:
        """Return a short human readable label used in errors and logs."""

        return f"{self.kind.value}({self.key!r})"


__all__ = [
    "BatchState",
    "OperationKind",
    "PendingOperation",
    "ScopeState",
]
