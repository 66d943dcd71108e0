"""Database initialization helpers."""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase

from .models import Base


def init_db(engine: Engine, base: type[DeclarativeBase] = Base) -> None:
    """Create the tables of every model registered on ``base``."""
    base.metadata.create_all(engine)
