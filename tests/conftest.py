from __future__ import annotations

import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from repobatch import InMemoryRecordStore, Repository
from repobatch.db.db_init import init_db
from repobatch.transactions.scope import current_scope
from tests.helpers.entities import Contact, EmailAddress

os.environ.setdefault("REPOBATCH_LOG_JSON", "false")


@pytest.fixture(autouse=True)
def _no_leaked_scope():
    assert current_scope() is None
    yield
    assert current_scope() is None, "test left a transaction scope active"


@pytest.fixture
def contacts() -> Repository[Contact]:
    return Repository(InMemoryRecordStore(Contact))


@pytest.fixture
def emails() -> Repository[EmailAddress]:
    return Repository(InMemoryRecordStore(EmailAddress))


@pytest.fixture
def session_factory() -> sessionmaker[Session]:
    engine = create_engine("sqlite:///:memory:", future=True)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)
    yield factory
    engine.dispose()
