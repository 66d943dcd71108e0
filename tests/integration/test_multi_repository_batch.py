"""Writes to several repositories inside one transaction scope."""

from __future__ import annotations

import pytest

from repobatch import InMemoryRecordStore, Repository, SqlAlchemyRecordStore, TransactionScope
from tests.helpers.entities import Contact, ContactModel, EmailAddress, EmailAddressModel


def test_adds_to_multiple_repositories_after_complete(contacts, emails) -> None:
    assert len(contacts.get_all()) == 0
    assert len(emails.get_all()) == 0

    with TransactionScope() as ts:
        contacts.add(Contact(contact_id=1))
        emails.add(EmailAddress(email_address_id=1))

        assert len(contacts.get_all()) == 0
        assert len(emails.get_all()) == 0

        ts.complete()

    assert len(contacts.get_all()) == 1
    assert len(emails.get_all()) == 1


def test_performs_all_actions_after_complete(contacts, emails) -> None:
    contacts.add(Contact(contact_id=1, name="A"))
    emails.add(EmailAddress(email_address_id=1, email="A"))
    emails.add(EmailAddress(email_address_id=2, email="A"))

    assert contacts.find(lambda c: c.contact_id == 1).name == "A"
    assert emails.find(lambda e: e.email_address_id == 1).email == "A"
    assert emails.find(lambda e: e.email_address_id == 2).email == "A"

    with TransactionScope() as ts:
        contacts.update(Contact(contact_id=1, name="B"))
        emails.update(EmailAddress(email_address_id=1, email="B"))
        emails.delete(EmailAddress(email_address_id=2))

        assert contacts.find(lambda c: c.contact_id == 1).name == "A"
        assert emails.find(lambda e: e.email_address_id == 1).email == "A"
        assert emails.find(lambda e: e.email_address_id == 2).email == "A"

        ts.complete()

    assert contacts.find(lambda c: c.contact_id == 1).name == "B"
    assert emails.find(lambda e: e.email_address_id == 1).email == "B"
    assert emails.find(lambda e: e.email_address_id == 2) is None


def test_performs_no_action_if_complete_not_called(contacts, emails) -> None:
    with TransactionScope():
        contacts.add(Contact(contact_id=1))
        emails.add(EmailAddress(email_address_id=1))

    assert len(contacts.get_all()) == 0
    assert len(emails.get_all()) == 0


def test_incomplete_scope_leaves_existing_state_untouched(contacts, emails) -> None:
    contacts.add(Contact(contact_id=1, name="A"))
    emails.add(EmailAddress(email_address_id=1, email="A"))
    before = (contacts.get_all(), emails.get_all())

    with TransactionScope():
        contacts.update(Contact(contact_id=1, name="B"))
        contacts.add(Contact(contact_id=2, name="C"))
        emails.delete(1)

    assert (contacts.get_all(), emails.get_all()) == before


def test_exception_in_scope_discards_everything(contacts, emails) -> None:
    with pytest.raises(RuntimeError):
        with TransactionScope() as ts:
            contacts.add(Contact(contact_id=1))
            emails.add(EmailAddress(email_address_id=1))
            raise RuntimeError("boom")
            ts.complete()  # pragma: no cover

    assert contacts.get_all() == []
    assert emails.get_all() == []


def test_single_repository_batch_backwards_compatibility() -> None:
    repo = Repository(InMemoryRecordStore(Contact))

    with repo.begin_batch() as batch:
        batch.add(Contact(contact_id=1))
        assert len(repo.get_all()) == 0

        batch.commit()

    assert len(repo.get_all()) == 1


def test_single_repository_batch_without_commit_is_discarded() -> None:
    repo = Repository(InMemoryRecordStore(Contact))

    with repo.begin_batch() as batch:
        batch.add(Contact(contact_id=1))

    assert repo.get_all() == []


def test_memory_and_sqlalchemy_stores_share_one_scope(session_factory) -> None:
    contacts = Repository(SqlAlchemyRecordStore(ContactModel, session_factory))
    emails = Repository(InMemoryRecordStore(EmailAddress))
    addresses = Repository(SqlAlchemyRecordStore(EmailAddressModel, session_factory))

    with TransactionScope() as ts:
        contacts.add(ContactModel(contact_id=1, name="A"))
        emails.add(EmailAddress(email_address_id=1, email="a@example.com"))
        addresses.add(EmailAddressModel(email_address_id=7, email="a@example.com"))

        assert contacts.get_all() == []
        assert addresses.count() == 0

        ts.complete()

    assert contacts.get(1).name == "A"
    assert emails.get(1).email == "a@example.com"
    assert addresses.exists(7)
