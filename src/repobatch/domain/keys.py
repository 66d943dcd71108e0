"""Identity attribute discovery for entity types."""

from __future__ import annotations

import dataclasses
import re
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from ..exceptions import KeyResolutionError

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """Convert ``EmailAddress`` into ``email_address``."""

    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _declared_fields(entity_type: type) -> set[str]:
    if dataclasses.is_dataclass(entity_type):
        return {field.name for field in dataclasses.fields(entity_type)}
    model_fields = getattr(entity_type, "model_fields", None)
    if isinstance(model_fields, dict):
        return set(model_fields)
    names = set(getattr(entity_type, "__annotations__", {}))
    names.update(name for name in vars(entity_type) if not name.startswith("_"))
    return names


def _mapped_primary_key(entity_type: type) -> str | None:
    try:
        mapper = sa_inspect(entity_type)
    except NoInspectionAvailable:
        return None
    columns = mapper.primary_key
    if len(columns) != 1:
        raise KeyResolutionError(
            f"{entity_type.__name__} must have exactly one primary key column, got {len(columns)}"
        )
    return mapper.get_property_by_column(columns[0]).key


def resolve_key_field(entity_type: type, key_field: str | None = None) -> str:
    """Return the name of the identity attribute of ``entity_type``.

    Lookup order: explicit ``key_field``, a ``__primary_key__`` class
    attribute, the primary key of a SQLAlchemy mapped class, an ``id``
    attribute and finally ``<snake_case_type_name>_id``.
    """

    if key_field:
        return key_field
    declared = getattr(entity_type, "__primary_key__", None)
    if isinstance(declared, str) and declared:
        return declared
    mapped = _mapped_primary_key(entity_type)
    if mapped:
        return mapped

    fields = _declared_fields(entity_type)
    for candidate in ("id", f"{snake_case(entity_type.__name__)}_id"):
        if candidate in fields:
            return candidate
    raise KeyResolutionError(
        f"cannot determine the key of {entity_type.__name__}; "
        "declare __primary_key__ or pass key_field"
    )


def read_key(entity: Any, key_field: str) -> Any:
    try:
        return getattr(entity, key_field)
    except AttributeError as exc:
        raise KeyResolutionError(
            f"{type(entity).__name__} has no key attribute '{key_field}'"
        ) from exc


__all__ = ["read_key", "resolve_key_field", "snake_case"]
