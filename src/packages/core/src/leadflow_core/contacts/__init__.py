"""Contact store."""
from leadflow_core.contacts.models import Contact, ContactFilters
from leadflow_core.contacts.rows import contact_from_row
from leadflow_core.contacts.repo import (
    init_db,
    email_key,
    find_by_email,
    get_contact,
    save_all,
    find_by_filters,
    record_contacts,
    count_contacts,
)

__all__ = [
    "Contact",
    "ContactFilters",
    "contact_from_row",
    "init_db",
    "email_key",
    "find_by_email",
    "get_contact",
    "save_all",
    "find_by_filters",
    "record_contacts",
    "count_contacts",
]
