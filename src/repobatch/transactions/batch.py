"""Ordered queue of deferred mutations against a single record store."""

from __future__ import annotations

from typing import Any

import structlog

from ..domain.models import BatchState, OperationKind, PendingOperation
from ..exceptions import BatchCommitError, TransactionScopeError
from ..infrastructure.record_store import RecordStore

logger = structlog.get_logger(__name__)


class Batch:
    """Queue add/update/delete operations until :meth:`commit` is called.

    Nothing reaches the store before ``commit``. Operations are replayed in
    submission order; the first failing operation aborts the commit, the
    remaining operations are dropped and :class:`BatchCommitError` is raised.
    Operations applied before the failure stay applied. A queued delete whose
    key is already absent when the batch commits is skipped.

    Entities are snapshotted by the store when they are queued, so changes
    made to the caller's object afterwards are not replayed.

    Used as a context manager the batch discards whatever was not committed
    when the block exits.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self._operations: list[PendingOperation] = []
        self._state = BatchState.OPEN

    @property
    def state(self) -> BatchState:
        return self._state

    @property
    def operations(self) -> tuple[PendingOperation, ...]:
        return tuple(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __enter__(self) -> Batch:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> None:
        self.close()

    def enqueue(self, operation: PendingOperation) -> None:
        if self._state is not BatchState.OPEN:
            raise TransactionScopeError("batch is closed")
        self._operations.append(operation)

    def add(self, entity: Any) -> None:
        key = self.store.key_of(entity)
        self.enqueue(PendingOperation.add(self.store.snapshot(entity), key=key))

    def update(self, entity: Any) -> None:
        key = self.store.key_of(entity)
        self.enqueue(PendingOperation.update(self.store.snapshot(entity), key=key))

    def delete(self, entity_or_key: Any) -> None:
        key = entity_or_key
        if isinstance(entity_or_key, self.store.entity_type):
            key = self.store.key_of(entity_or_key)
        self.enqueue(PendingOperation.delete(key))

    def commit(self) -> None:
        """Replay queued operations against the store and clear the queue."""

        operations, self._operations = self._operations, []
        for applied, operation in enumerate(operations):
            try:
                self._apply(operation)
            except Exception as exc:
                logger.warning(
                    "batch_commit_failed",
                    store=type(self.store).__name__,
                    operation=operation.describe(),
                    applied=applied,
                    dropped=len(operations) - applied - 1,
                )
                raise BatchCommitError(operation, exc) from exc
        logger.debug("batch_committed", store=type(self.store).__name__, applied=len(operations))

    def discard(self) -> None:
        """Drop queued operations without touching the store."""

        if self._operations:
            logger.debug(
                "batch_discarded",
                store=type(self.store).__name__,
                dropped=len(self._operations),
            )
        self._operations.clear()

    rollback = discard

    def close(self) -> None:
        """Discard pending operations and refuse further ones."""

        self.discard()
        self._state = BatchState.CLOSED

    def _apply(self, operation: PendingOperation) -> None:
        if operation.kind is OperationKind.ADD:
            self.store.add(operation.entity)
        elif operation.kind is OperationKind.UPDATE:
            self.store.update(operation.entity)
        elif self.store.contains(operation.key):
            self.store.delete(operation.key)
        else:
            logger.debug(
                "batch_delete_skipped",
                store=type(self.store).__name__,
                key=operation.key,
            )


__all__ = ["Batch"]
