"""Transactional boundary protocol shared by batches and transaction scopes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class UnitOfWork(Protocol):
    """Boundary collecting writes that are applied together or not at all.

    :class:`~repobatch.transactions.batch.Batch` is the single-store
    implementation. Leaving the context without committing must discard every
    queued change.
    """

    def __enter__(self) -> UnitOfWork:
        """Enter the transactional context."""

        raise NotImplementedError

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> None:
        """Exit the transactional context, discarding pending work if needed."""

        raise NotImplementedError

    def commit(self) -> None:
        """Apply the queued changes."""

        raise NotImplementedError

    def rollback(self) -> None:
        """Drop the queued changes."""

        raise NotImplementedError
