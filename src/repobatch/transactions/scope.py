"""Transaction scopes coordinating batches across several record stores.

A scope is published in a :class:`~contextvars.ContextVar` while it is active,
so every thread and every asyncio task sees its own scope. Repositories look
the scope up (or receive it explicitly) and obtain their batch through
:meth:`TransactionScope.register_participant`. Nothing reaches a store until
the outermost scope ends after :meth:`TransactionScope.complete` was called.

Usage::

    with TransactionScope() as scope:
        contacts.add(contact)
        emails.add(email)
        scope.complete()
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Iterator

import structlog

from ..domain.models import ScopeState
from ..exceptions import BatchCommitError, TransactionAbortedError, TransactionScopeError
from ..infrastructure.record_store import RecordStore
from .batch import Batch

logger = structlog.get_logger(__name__)

_current_scope: ContextVar["TransactionScope | None"] = ContextVar(
    "repobatch_transaction_scope", default=None
)


def current_scope() -> TransactionScope | None:
    """Return the scope active on the current execution context, if any."""

    return _current_scope.get()


class TransactionScope:
    """Unit of work shared by every repository written to while it is active.

    Beginning a scope while another one is active nests it: the nested scope
    shares the outer scope's batches and its :meth:`complete` only records a
    vote. A nested scope that ends without completing dooms the whole
    transaction; completing an enclosing scope afterwards raises
    :class:`TransactionAbortedError` and the outermost scope discards.

    When the outermost scope ends it commits every joined batch in join order
    if it was completed, otherwise it discards them. A failing batch does not
    stop the remaining batches from committing; the first
    :class:`BatchCommitError` is raised once all of them were attempted.
    """

    def __init__(self) -> None:
        self.scope_id = uuid.uuid4().hex[:8]
        self._state = ScopeState.CREATED
        self._completed = False
        self._doomed = False
        self._parent: TransactionScope | None = None
        self._token: Token[TransactionScope | None] | None = None
        self._participants: dict[int, Batch] = {}
        self._log = logger.bind(scope_id=self.scope_id)

    @property
    def state(self) -> ScopeState:
        return self._state

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def root(self) -> TransactionScope:
        scope = self
        while scope._parent is not None:
            scope = scope._parent
        return scope

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def doomed(self) -> bool:
        return self.root._doomed

    @property
    def participants(self) -> tuple[Batch, ...]:
        """Batches joined to the transaction, in join order."""

        return tuple(self.root._participants.values())

    def __enter__(self) -> TransactionScope:
        return self.begin()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> None:
        self.end()

    def begin(self) -> TransactionScope:
        """Activate the scope, nesting it inside the active one if present."""

        if self._state is not ScopeState.CREATED:
            raise TransactionScopeError(f"scope {self.scope_id} was already begun")
        parent = _current_scope.get()
        if parent is not None and parent._state is ScopeState.ACTIVE:
            self._parent = parent
        self._token = _current_scope.set(self)
        self._state = ScopeState.ACTIVE
        if self._parent is None:
            self._log.debug("scope_begun")
        else:
            self._log.debug("scope_nested", parent_id=self._parent.scope_id)
        return self

    def register_participant(self, store: RecordStore) -> Batch:
        """Return the batch collecting writes for ``store``, creating it once."""

        self._ensure_active()
        root = self.root
        batch = root._participants.get(id(store))
        if batch is None:
            batch = Batch(store)
            root._participants[id(store)] = batch
            self._log.debug(
                "participant_joined",
                store=type(store).__name__,
                position=len(root._participants),
            )
        return batch

    def complete(self) -> None:
        """Vote to commit. Takes effect when the outermost scope ends."""

        self._ensure_active()
        if self.doomed:
            raise TransactionAbortedError(
                f"scope {self.scope_id} cannot complete: a nested scope did not complete"
            )
        if self._completed:
            raise TransactionScopeError(f"scope {self.scope_id} is already completed")
        self._completed = True

    def end(self) -> None:
        """Leave the scope, committing or discarding if it is the outermost one."""

        if self._state is not ScopeState.ACTIVE:
            raise TransactionScopeError(f"scope {self.scope_id} is not active")
        if _current_scope.get() is not self:
            raise TransactionScopeError(
                f"scope {self.scope_id} is not the innermost active scope; "
                "end nested scopes first"
            )
        self._deactivate()

        if self._parent is not None:
            if not self._completed:
                self.root._doomed = True
                self._log.info("nested_scope_not_completed", root_id=self.root.scope_id)
            self._state = ScopeState.COMMITTED if self._completed else ScopeState.DISCARDED
            return

        if self._completed and not self._doomed:
            self._commit_participants()
        else:
            self._discard_participants()

    def _commit_participants(self) -> None:
        batches = list(self._participants.values())
        first_error: BatchCommitError | None = None
        for batch in batches:
            try:
                batch.commit()
            except BatchCommitError as exc:
                if first_error is None:
                    first_error = exc
                else:
                    first_error.additional_errors.append(exc)
            finally:
                batch.close()
        self._participants.clear()

        if first_error is not None:
            self._state = ScopeState.FAILED
            self._log.error(
                "scope_commit_failed",
                batches=len(batches),
                failures=1 + len(first_error.additional_errors),
                error=str(first_error),
            )
            raise first_error
        self._state = ScopeState.COMMITTED
        self._log.info("scope_committed", batches=len(batches))

    def _discard_participants(self) -> None:
        batches = list(self._participants.values())
        for batch in batches:
            batch.close()
        self._participants.clear()
        self._state = ScopeState.DISCARDED
        self._log.info("scope_discarded", batches=len(batches), doomed=self._doomed)

    def _deactivate(self) -> None:
        token, self._token = self._token, None
        if token is None:
            return
        try:
            _current_scope.reset(token)
        except ValueError:
            # token belongs to another context
            if _current_scope.get() is self:
                _current_scope.set(self._parent)

    def _ensure_active(self) -> None:
        if self._state is not ScopeState.ACTIVE or self.root._state is not ScopeState.ACTIVE:
            raise TransactionScopeError(f"scope {self.scope_id} is not active")


@contextmanager
def transaction_scope() -> Iterator[TransactionScope]:
    """Yield an active scope and end it when the block exits."""

    scope = TransactionScope().begin()
    try:
        yield scope
    finally:
        scope.end()


__all__ = ["TransactionScope", "current_scope", "transaction_scope"]
