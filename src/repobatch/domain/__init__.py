"""Domain vocabulary: pending operations, lifecycle states and entity keys."""

from .keys import read_key, resolve_key_field, snake_case
from .models import BatchState, OperationKind, PendingOperation, ScopeState

__all__ = [
    "BatchState",
    "OperationKind",
    "PendingOperation",
    "ScopeState",
    "read_key",
    "resolve_key_field",
    "snake_case",
]
