"""Mapping spreadsheet rows onto contacts.

Rows arrive keyed by normalized header ("first name", "email", ...). Only
``first name``, ``last name`` and ``email`` are required; every other
recognized column is optional and unrecognized columns are ignored.
"""
from datetime import datetime
from typing import Any

from leadflow_core.contacts.models import Contact
from leadflow_core.util.time import utc_now

REQUIRED_FIELDS = ("first name", "last name", "email")

TEXT_FIELDS = {
    "phone": "phone_number",
    "phone number": "phone_number",
    "company": "company_name",
    "job title": "job_title",
    "address": "address",
    "city": "city",
    "state": "state",
    "zip code": "zip_code",
    "client type": "client_type",
    "client status": "client_status",
    "lead source": "lead_source",
    "notes": "notes",
}

BOOL_FIELDS = {
    "active": "is_active",
    "email opted in": "email_opted_in",
    "sms opted in": "sms_opted_in",
}

COUNT_FIELDS = {
    "email contact count": "email_contact_count",
    "phone contact count": "sms_contact_count",
    "sms contact count": "sms_contact_count",
}

DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y",
)

TRUTHY = {"yes", "true", "1", "y"}


def _value(row: dict[str, Any], key: str) -> str:
    v = row.get(key)
    return str(v).strip() if v is not None else ""


def parse_bool(value: str) -> bool:
    return value.strip().lower() in TRUTHY


def parse_count(value: str) -> int:
    try:
        return int(float(value.strip()))
    except ValueError:
        return 0


def parse_date(value: str) -> datetime | None:
    """Parse the date formats spreadsheets commonly carry."""
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


def contact_from_row(row: dict[str, Any]) -> Contact:
    """Build a contact from one row; raises ValueError when a required field is blank."""
    first_name, last_name, email = (_value(row, f) for f in REQUIRED_FIELDS)
    if not (first_name and last_name and email):
        raise ValueError("First name, last name, and email are required")

    data: dict[str, Any] = {
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
    }
    for column, field in TEXT_FIELDS.items():
        v = _value(row, column)
        if v and not data.get(field):
            data[field] = v
    for column, field in BOOL_FIELDS.items():
        v = _value(row, column)
        if v:
            data[field] = parse_bool(v)
    for column, field in COUNT_FIELDS.items():
        v = _value(row, column)
        if v:
            data[field] = parse_count(v)
    data["total_contact_count"] = data.get("email_contact_count", 0) + data.get(
        "sms_contact_count", 0
    )

    date_added = _value(row, "date added")
    if date_added:
        # Unparseable dates fall back to the import time
        data["created_at"] = parse_date(date_added) or utc_now()
    return Contact(**data)
