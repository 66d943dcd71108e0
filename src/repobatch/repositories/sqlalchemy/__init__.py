"""SQLAlchemy-based record store implementations."""

from .store import SqlAlchemyRecordStore

__all__ = ["SqlAlchemyRecordStore"]
