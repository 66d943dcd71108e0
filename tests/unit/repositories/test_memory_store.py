from __future__ import annotations

import pytest

from repobatch.exceptions import DuplicateKeyError, KeyResolutionError, NotFoundError
from repobatch.infrastructure.record_store import RecordStore
from repobatch.repositories.memory import InMemoryRecordStore
from tests.helpers.entities import Contact, Note


def test_implements_record_store_contract() -> None:
    assert isinstance(InMemoryRecordStore(Contact), RecordStore)


def test_add_get_update_delete() -> None:
    store = InMemoryRecordStore(Contact)
    store.add(Contact(contact_id=1, name="A"))
    assert store.get(1) == Contact(contact_id=1, name="A")

    store.update(Contact(contact_id=1, name="B"))
    assert store.get(1).name == "B"

    store.delete(1)
    assert store.get(1) is None
    assert len(store) == 0


def test_duplicate_add_raises() -> None:
    store = InMemoryRecordStore(Contact)
    store.add(Contact(contact_id=1))

    with pytest.raises(DuplicateKeyError, match="Contact '1' already exists"):
        store.add(Contact(contact_id=1))


def test_update_and_delete_of_missing_key_raise() -> None:
    store = InMemoryRecordStore(Contact)

    with pytest.raises(NotFoundError):
        store.update(Contact(contact_id=3))
    with pytest.raises(NotFoundError, match="Contact '3' not found"):
        store.delete(3)


def test_snapshots_are_isolated_from_callers() -> None:
    store = InMemoryRecordStore(Contact)
    contact = Contact(contact_id=1, name="A")
    store.add(contact)

    contact.name = "mutated"
    fetched = store.get(1)
    fetched.name = "also mutated"

    assert store.get(1).name == "A"


def test_get_all_keeps_insertion_order() -> None:
    store = InMemoryRecordStore(Contact)
    for contact_id in (3, 1, 2):
        store.add(Contact(contact_id=contact_id))

    assert [c.contact_id for c in store.get_all()] == [3, 1, 2]


def test_generates_integer_keys() -> None:
    store = InMemoryRecordStore(Contact)
    store.add(Contact(contact_id=5))
    generated = Contact(name="new")

    store.add(generated)

    assert generated.contact_id == 6
    assert store.contains(6)


def test_key_generation_can_be_disabled() -> None:
    store = InMemoryRecordStore(Contact, generate_keys=False)

    with pytest.raises(KeyResolutionError):
        store.add(Contact(name="keyless"))


def test_declared_primary_key() -> None:
    store = InMemoryRecordStore(Note)
    store.add(Note(slug="hello", body="world"))

    assert store.key_field == "slug"
    assert store.get("hello").body == "world"
