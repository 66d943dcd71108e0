"""Error hierarchy shared by stores, batches and transaction scopes."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator

from sqlalchemy import exc as sa_exc

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .domain.models import PendingOperation

__all__ = [
    "RepobatchError",
    "RepositoryError",
    "NotFoundError",
    "DuplicateKeyError",
    "KeyResolutionError",
    "StoreNotRegisteredError",
    "IntegrityConstraintViolation",
    "DatabaseOperationError",
    "BatchCommitError",
    "TransactionScopeError",
    "TransactionAbortedError",
    "ensure_found",
    "ensure_absent",
    "handle_sqlalchemy_errors",
]


class RepobatchError(Exception):
    """Base class for library specific errors."""


class RepositoryError(RepobatchError):
    """Base class for persistence layer failures."""


class NotFoundError(RepositoryError):
    """Raised when a record could not be located."""


class DuplicateKeyError(RepositoryError):
    """Raised when adding a record whose identity is already stored."""


class KeyResolutionError(RepositoryError):
    """Raised when the identity attribute of an entity type cannot be determined."""


class StoreNotRegisteredError(RepositoryError):
    """Raised when no store factory is registered for an entity type."""


class IntegrityConstraintViolation(RepositoryError):
    """Raised when a database constraint is violated."""


class DatabaseOperationError(RepositoryError):
    """Raised for unexpected database errors."""


class BatchCommitError(RepobatchError):
    """Raised when a queued operation fails while a batch is committed.

    ``operation`` is the pending operation that failed and ``cause`` the
    original exception. When a transaction scope commits several batches and
    more than one fails, the later failures are kept in ``additional_errors``.
    """

    def __init__(self, operation: "PendingOperation", cause: BaseException) -> None:
        super().__init__(f"{operation.describe()} failed: {cause}")
        self.operation = operation
        self.cause = cause
        self.additional_errors: list[BatchCommitError] = []


class TransactionScopeError(RepobatchError):
    """Raised when a transaction scope is used outside of its lifecycle."""


class TransactionAbortedError(TransactionScopeError):
    """Raised when completing a transaction that a nested scope already doomed."""


@dataclass(slots=True)
class _EntityContext:
    """Internal helper describing the entity for error messages."""

    entity: str | None = None

    def format(self, message: str) -> str:
        if self.entity:
            return f"{self.entity}: {message}"
        return message


def ensure_found(record: Any | None, *, entity: str, identifier: object) -> Any:
    """Ensure a record exists, otherwise raise :class:`NotFoundError`."""

    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


def ensure_absent(record: Any | None, *, entity: str, identifier: object) -> None:
    """Ensure no record is stored under ``identifier``."""

    if record is not None:
        raise DuplicateKeyError(f"{entity} '{identifier}' already exists")


def _translate_sqlalchemy_error(exc: Exception, *, context: _EntityContext) -> RepositoryError:
    if isinstance(exc, sa_exc.IntegrityError):
        return IntegrityConstraintViolation(context.format("integrity constraint violated"))
    if isinstance(exc, sa_exc.DBAPIError):
        return DatabaseOperationError(context.format("database operation failed"))
    return RepositoryError(context.format(str(exc)))


@contextmanager
def handle_sqlalchemy_errors(*, entity: str | None = None) -> Iterator[None]:
    """Translate SQLAlchemy errors into repository specific ones."""

    context = _EntityContext(entity)
    try:
        yield
    except (sa_exc.IntegrityError, sa_exc.DBAPIError) as exc:
        raise _translate_sqlalchemy_error(exc, context=context) from exc
