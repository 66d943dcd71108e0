"""Record store over a SQLAlchemy declarative model."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.orm import Session

from ...domain.keys import read_key, resolve_key_field
from ...exceptions import ensure_absent, ensure_found, handle_sqlalchemy_errors

logger = structlog.get_logger(__name__)


class SqlAlchemyRecordStore:
    """Persist instances of one mapped class, one short session per call.

    ``session_factory`` must build sessions with ``expire_on_commit=False`` so
    the instances handed back remain readable once their session is closed.
    ``get_all`` returns rows ordered by primary key.
    """

    def __init__(
        self,
        entity_type: type,
        session_factory: Callable[[], Session],
        *,
        key_field: str | None = None,
    ) -> None:
        self.entity_type = entity_type
        self.key_field = resolve_key_field(entity_type, key_field)
        self._session_factory = session_factory
        self._mapper = sa_inspect(entity_type)

    @property
    def name(self) -> str:
        return self.entity_type.__name__

    def key_of(self, entity: Any) -> Any:
        return read_key(entity, self.key_field)

    def snapshot(self, entity: Any) -> Any:
        """Copy column values into a new transient instance; relationships are not copied."""
        values = {attr.key: getattr(entity, attr.key) for attr in self._mapper.column_attrs}
        return self.entity_type(**values)

    def get(self, key: Any) -> Any | None:
        with self._session_factory() as session:
            return session.get(self.entity_type, key)

    def get_all(self) -> list[Any]:
        with self._session_factory() as session:
            statement = select(self.entity_type).order_by(*self._mapper.primary_key)
            return list(session.scalars(statement).all())

    def contains(self, key: Any) -> bool:
        return self.get(key) is not None

    def add(self, entity: Any) -> None:
        key = self.key_of(entity)
        with handle_sqlalchemy_errors(entity=self.name), self._session_factory() as session:
            if key is not None:
                ensure_absent(session.get(self.entity_type, key), entity=self.name, identifier=key)
            session.add(entity)
            session.commit()
            key = self.key_of(entity)
        logger.debug("record_added", store=self.name, key=key)

    def update(self, entity: Any) -> None:
        key = self.key_of(entity)
        with handle_sqlalchemy_errors(entity=self.name), self._session_factory() as session:
            ensure_found(session.get(self.entity_type, key), entity=self.name, identifier=key)
            session.merge(entity)
            session.commit()
        logger.debug("record_updated", store=self.name, key=key)

    def delete(self, key: Any) -> None:
        with handle_sqlalchemy_errors(entity=self.name), self._session_factory() as session:
            model = ensure_found(
                session.get(self.entity_type, key), entity=self.name, identifier=key
            )
            session.delete(model)
            session.commit()
        logger.debug("record_deleted", store=self.name, key=key)


__all__ = ["SqlAlchemyRecordStore"]
