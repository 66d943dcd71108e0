"""repobatch: repositories over interchangeable record stores with batched,
scope-coordinated writes.

Writes issued through :class:`Repository` while a :class:`TransactionScope` is
active are queued per store and applied together when the scope completes.
"""

from .exceptions import (
    BatchCommitError,
    DuplicateKeyError,
    NotFoundError,
    RepobatchError,
    RepositoryError,
    TransactionAbortedError,
    TransactionScopeError,
)
from .registry import StoreRegistry
from .repositories import InMemoryRecordStore, SqlAlchemyRecordStore
from .repository import Repository
from .transactions import Batch, TransactionScope, current_scope, transaction_scope

__all__ = [
    "Batch",
    "BatchCommitError",
    "DuplicateKeyError",
    "InMemoryRecordStore",
    "NotFoundError",
    "RepobatchError",
    "Repository",
    "RepositoryError",
    "SqlAlchemyRecordStore",
    "StoreRegistry",
    "TransactionAbortedError",
    "TransactionScope",
    "TransactionScopeError",
    "current_scope",
    "transaction_scope",
]
