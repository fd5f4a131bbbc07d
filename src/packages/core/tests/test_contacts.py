"""Tests for the contact store and row mapping."""
from datetime import datetime

import pytest

from leadflow_core.contacts import (
    Contact,
    ContactFilters,
    contact_from_row,
    count_contacts,
    find_by_email,
    find_by_filters,
    get_contact,
    record_contacts,
    save_all,
)
from leadflow_core.util.errors import StoreUnavailableError


def _contact(email, **kw):
    return Contact(first_name="Ann", last_name="Lee", email=email, **kw)


def test_save_all_flags_conflicts():
    inserted = save_all([_contact("ann@example.com"), _contact("bob@example.com")])
    assert inserted == [True, True]

    again = save_all([_contact("ANN@example.com"), _contact("cat@example.com")])
    assert again == [False, True]
    assert count_contacts() == 3


def test_save_all_assigns_ids():
    contacts = [_contact("ann@example.com")]
    save_all(contacts)
    assert contacts[0].id is not None
    assert get_contact(contacts[0].id).email == "ann@example.com"


def test_find_by_email_ignores_case():
    save_all([_contact("Ann@Example.com", city="Austin", sms_opted_in=True)])
    found = find_by_email("ann@example.COM")
    assert found is not None
    assert found.city == "Austin"
    assert found.sms_opted_in is True
    assert find_by_email("nobody@example.com") is None


def test_find_by_filters():
    save_all(
        [
            _contact("a@example.com", city="Austin", client_type="SELLER"),
            _contact("b@example.com", city="austin", client_type="BUYER"),
            _contact("c@example.com", city="Dallas", client_type="SELLER"),
        ]
    )
    assert len(find_by_filters()) == 3
    assert [c.email for c in find_by_filters(ContactFilters(city="Austin"))] == [
        "a@example.com",
        "b@example.com",
    ]
    sellers = find_by_filters(ContactFilters(city="AUSTIN", client_type="seller"))
    assert [c.email for c in sellers] == ["a@example.com"]


def test_record_contacts_bumps_counts():
    contacts = [_contact("a@example.com"), _contact("b@example.com")]
    save_all(contacts)
    assert record_contacts([contacts[0].id], "email") == 1
    assert record_contacts([contacts[0].id, contacts[1].id], "sms") == 2

    a = get_contact(contacts[0].id)
    assert (a.email_contact_count, a.sms_contact_count, a.total_contact_count) == (1, 1, 2)
    assert a.last_contact_date is not None
    assert record_contacts([], "email") == 0


def test_unreachable_store(monkeypatch, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    monkeypatch.setenv("SQLITE_PATH", str(blocker / "contacts.db"))
    with pytest.raises(StoreUnavailableError):
        find_by_email("a@example.com")


def test_contact_from_row_full():
    contact = contact_from_row(
        {
            "first name": "Ann",
            "last name": "Lee",
            "email": "ann@example.com",
            "phone": "+1 (512) 555-0100",
            "company": "Acme",
            "zip code": "02134",
            "email opted in": "Yes",
            "sms opted in": "0",
            "email contact count": "3",
            "phone contact count": "oops",
            "date added": "03/15/2023",
            "favourite colour": "blue",
        }
    )
    assert contact.phone_number == "+1 (512) 555-0100"
    assert contact.company_name == "Acme"
    assert contact.zip_code == "02134"
    assert contact.email_opted_in is True
    assert contact.sms_opted_in is False
    assert contact.email_contact_count == 3
    assert contact.sms_contact_count == 0
    assert contact.total_contact_count == 3
    assert contact.created_at == datetime(2023, 3, 15)


def test_contact_from_row_requires_names():
    with pytest.raises(ValueError, match="required"):
        contact_from_row({"email": "ann@example.com", "first name": "Ann"})


def test_contact_from_row_bad_date_falls_back_to_now():
    contact = contact_from_row(
        {"first name": "A", "last name": "B", "email": "a@b.co", "date added": "someday"}
    )
    assert contact.created_at.year >= 2024
