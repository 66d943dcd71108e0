"""Record store adapters."""

from .memory import InMemoryRecordStore
from .sqlalchemy import SqlAlchemyRecordStore

__all__ = ["InMemoryRecordStore", "SqlAlchemyRecordStore"]
