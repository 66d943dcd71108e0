"""Runtime configuration builder."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .core.config import RepositorySettings
from .db.db_init import init_db
from .db.models import Base


@dataclass(slots=True)
class StoreConfig:
    settings: RepositorySettings
    engine: Engine
    session_factory: sessionmaker[Session]


def load_config(
    settings: RepositorySettings | None = None,
    *,
    base: type[DeclarativeBase] = Base,
) -> StoreConfig:
    """Build engine and session factory from settings (SQLite in memory by default)."""
    settings = settings or RepositorySettings.build_default()
    engine = create_engine(settings.database_url, echo=settings.sql_echo, future=True)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)

    init_db(engine, base)

    return StoreConfig(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
    )
