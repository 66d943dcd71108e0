"""Declarative base for entities persisted through SqlAlchemyRecordStore."""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base declarative class."""
