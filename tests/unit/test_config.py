from __future__ import annotations

import structlog
from sqlalchemy.orm import Session

from repobatch.config import load_config
from repobatch.core.config import RepositorySettings
from repobatch.logging import configure_logging
from repobatch.repositories.sqlalchemy.store import SqlAlchemyRecordStore
from tests.helpers.entities import ContactModel


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("REPOBATCH_DATABASE_URL", "sqlite:///custom.db")
    monkeypatch.setenv("REPOBATCH_GENERATE_KEYS", "false")
    monkeypatch.setenv("REPOBATCH_LOG_LEVEL", "DEBUG")

    settings = RepositorySettings.build_default()

    assert settings.database_url == "sqlite:///custom.db"
    assert settings.generate_keys is False
    assert settings.log_level == "DEBUG"


def test_load_config_creates_tables() -> None:
    config = load_config(RepositorySettings(database_url="sqlite:///:memory:"))

    with config.session_factory() as session:
        assert isinstance(session, Session)

    store = SqlAlchemyRecordStore(ContactModel, config.session_factory)
    store.add(ContactModel(contact_id=1, name="A"))
    assert store.get(1).name == "A"
    config.engine.dispose()


def test_configure_logging_console_renderer() -> None:
    configure_logging(RepositorySettings(log_json=False, log_level="warning"))
    try:
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert structlog.get_config()["logger_factory"].__class__ is structlog.stdlib.LoggerFactory
    finally:
        structlog.reset_defaults()


def test_configure_logging_json_renderer() -> None:
    configure_logging(RepositorySettings(log_json=True))
    try:
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    finally:
        structlog.reset_defaults()
