"""Contact repository using SQLite."""
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterable

import structlog

from leadflow_core.contacts.models import Contact, ContactFilters
from leadflow_core.util.errors import StoreUnavailableError
from leadflow_core.util.time import utc_now

logger = structlog.get_logger()

SCHEMA = """
CREATE TABLE IF NOT EXISTS contacts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    email TEXT NOT NULL,
    email_key TEXT NOT NULL UNIQUE,
    phone_number TEXT,
    company_name TEXT,
    job_title TEXT,
    address TEXT,
    city TEXT,
    state TEXT,
    zip_code TEXT,
    client_type TEXT,
    client_status TEXT,
    lead_source TEXT,
    notes TEXT,
    is_active INTEGER DEFAULT 1,
    email_opted_in INTEGER DEFAULT 0,
    sms_opted_in INTEGER DEFAULT 0,
    email_contact_count INTEGER DEFAULT 0,
    sms_contact_count INTEGER DEFAULT 0,
    total_contact_count INTEGER DEFAULT 0,
    last_contact_date TEXT,
    created_at TEXT
);
"""

COLUMNS = [
    "first_name",
    "last_name",
    "email",
    "email_key",
    "phone_number",
    "company_name",
    "job_title",
    "address",
    "city",
    "state",
    "zip_code",
    "client_type",
    "client_status",
    "lead_source",
    "notes",
    "is_active",
    "email_opted_in",
    "sms_opted_in",
    "email_contact_count",
    "sms_contact_count",
    "total_contact_count",
    "last_contact_date",
    "created_at",
]

CHANNEL_COLUMNS = {"email": "email_contact_count", "sms": "sms_contact_count"}


def _get_sqlite_path() -> str:
    return os.environ.get("SQLITE_PATH", "/data/contacts.db")


def email_key(email: str) -> str:
    """Case-insensitive natural key for a contact."""
    return email.strip().lower()


@contextmanager
def get_conn():
    """Get a database connection."""
    path = _get_sqlite_path()
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        conn = sqlite3.connect(path, timeout=30)
    except (OSError, sqlite3.Error) as e:
        raise StoreUnavailableError(f"Contact store unavailable: {e}") from e
    conn.row_factory = sqlite3.Row
    try:
        conn.executescript(SCHEMA)
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreUnavailableError(f"Contact store error: {e}") from e
    finally:
        conn.close()


def init_db():
    """Initialize the database."""
    with get_conn():
        pass


def _to_row(contact: Contact) -> tuple:
    data = contact.model_dump()
    data["email_key"] = email_key(contact.email)
    for flag in ("is_active", "email_opted_in", "sms_opted_in"):
        data[flag] = int(bool(data[flag]))
    for ts in ("last_contact_date", "created_at"):
        data[ts] = data[ts].isoformat() if data[ts] else None
    return tuple(data[c] for c in COLUMNS)


def _from_row(row: sqlite3.Row) -> Contact:
    data: dict[str, Any] = dict(row)
    data.pop("email_key", None)
    for ts in ("last_contact_date", "created_at"):
        if data.get(ts):
            data[ts] = datetime.fromisoformat(data[ts])
        elif ts == "created_at":
            data.pop(ts)
    return Contact(**data)


def find_by_email(email: str) -> Contact | None:
    """Get a contact by email, ignoring case."""
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM contacts WHERE email_key = ?", (email_key(email),)
        ).fetchone()
        if row is None:
            return None
        return _from_row(row)


def get_contact(contact_id: int) -> Contact | None:
    """Get a contact by ID."""
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM contacts WHERE id = ?", (contact_id,)
        ).fetchone()
        if row is None:
            return None
        return _from_row(row)


def save_all(contacts: list[Contact]) -> list[bool]:
    """Insert contacts in one transaction.

    Returns one flag per contact: False when the email already existed and the
    row was left untouched by the unique index.
    """
    placeholders = ", ".join("?" for _ in COLUMNS)
    sql = (
        f"INSERT INTO contacts ({', '.join(COLUMNS)}) VALUES ({placeholders}) "
        "ON CONFLICT(email_key) DO NOTHING"
    )
    inserted = []
    with get_conn() as conn:
        for contact in contacts:
            cur = conn.execute(sql, _to_row(contact))
            inserted.append(cur.rowcount == 1)
            if cur.rowcount == 1:
                contact.id = cur.lastrowid
    logger.info("contacts_saved", inserted=sum(inserted), conflicts=len(contacts) - sum(inserted))
    return inserted


def find_by_filters(filters: ContactFilters | None = None) -> list[Contact]:
    """List contacts matching every filter that is set, oldest first."""
    clauses = []
    params = []
    for column, value in (filters.active() if filters else {}).items():
        clauses.append(f"LOWER({column}) = ?")
        params.append(value.strip().lower())
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    with get_conn() as conn:
        rows = conn.execute(
            f"SELECT * FROM contacts {where} ORDER BY id", params
        ).fetchall()
        return [_from_row(r) for r in rows]


def record_contacts(contact_ids: Iterable[int], channel: str) -> int:
    """Bump contact counters for contacts reached on a channel."""
    column = CHANNEL_COLUMNS[channel]
    ids = [i for i in contact_ids if i is not None]
    if not ids:
        return 0
    now = utc_now().isoformat()
    with get_conn() as conn:
        cur = conn.executemany(
            f"""
            UPDATE contacts SET
                {column} = {column} + 1,
                total_contact_count = total_contact_count + 1,
                last_contact_date = ?
            WHERE id = ?
            """,
            [(now, i) for i in ids],
        )
        return cur.rowcount


def count_contacts() -> int:
    """Count stored contacts."""
    with get_conn() as conn:
        return conn.execute("SELECT COUNT(*) FROM contacts").fetchone()[0]
