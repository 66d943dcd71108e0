"""Contracts implemented by store adapters and transactional boundaries."""

from __future__ import annotations

from .record_store import RecordStore
from .unit_of_work import UnitOfWork

__all__ = [
    "RecordStore",
    "UnitOfWork",
]
