"""Settings for repobatch wiring.

Values are read from ``REPOBATCH_*`` environment variables. The defaults keep
everything in process: SQLite in memory for SQLAlchemy backed stores and
generated integer keys for in-memory stores.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepositorySettings(BaseSettings):
    """Pydantic settings container for stores and logging."""

    model_config = SettingsConfigDict(env_prefix="REPOBATCH_")

    database_url: str = Field(
        default="sqlite:///:memory:",
        description="SQLAlchemy URL used by SqlAlchemyRecordStore instances.",
    )
    sql_echo: bool = Field(
        default=False,
        description="Echo SQL statements emitted by the engine.",
    )
    generate_keys: bool = Field(
        default=True,
        description="Assign integer keys to in-memory entities added without one.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level applied by configure_logging.",
    )
    log_json: bool = Field(
        default=True,
        description="Render structlog events as JSON instead of console output.",
    )

    @classmethod
    def build_default(cls) -> "RepositorySettings":
        """Construct settings from the environment."""

        return cls()


__all__ = ["RepositorySettings"]
