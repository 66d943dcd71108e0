"""Deferred writes: batches and the transaction scopes that coordinate them."""

from .batch import Batch
from .scope import TransactionScope, current_scope, transaction_scope

__all__ = ["Batch", "TransactionScope", "current_scope", "transaction_scope"]
