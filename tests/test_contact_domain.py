from __future__ import annotations

from datetime import datetime, timezone

import pytest

from contacts import repository
from contacts.domain import Contact


def test_new_contact_normalizes_fields():
    contact = Contact.new(phone_number=" +12025550100 ", name=" Ann ", surname="Lee", email=" Ann@Example.COM ")

    assert contact.phone_number == "+12025550100"
    assert contact.name == "Ann"
    assert contact.email == "ann@example.com"
    assert contact.full_name == "Lee Ann"
    assert contact.created_at == contact.modified_at


def test_contact_requires_phone_number():
    with pytest.raises(ValueError):
        Contact.new(phone_number="  ")


def test_contact_rejects_unknown_gender():
    with pytest.raises(ValueError):
        Contact.new(phone_number="+1", gender="robot")


def test_with_changes_keeps_identity():
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    contact = Contact.new(phone_number="+1", now=created)

    changed = contact.with_changes(name="Bob", id="ignored", created_at="ignored")

    assert changed.id == contact.id
    assert changed.created_at == created
    assert changed.modified_at > created
    assert changed.name == "Bob"


def test_copy_record_matches_column_order():
    contact = Contact.new(phone_number="+1", name="Ann", age=30, gender="female")
    row = dict(zip(repository.CONTACT_COLUMNS, contact.copy_record()))

    assert row["id"] == contact.id
    assert row["phone_number"] == "+1"
    assert row["age"] == 30
    assert row["gender"] == "female"
    assert Contact.from_row(row) == contact
