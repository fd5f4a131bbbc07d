"""Job definitions for contact imports and email/SMS campaigns."""
import os
from pathlib import Path

import structlog

from leadflow_core.contacts import (
    Contact,
    ContactFilters,
    contact_from_row,
    email_key,
    find_by_email,
    find_by_filters,
    record_contacts,
    save_all,
)
from leadflow_core.ingest import detect_format, load_records, read_columns, require_columns
from leadflow_core.ingest.normalize import is_blank, is_malformed
from leadflow_core.jobs import (
    Accept,
    BatchPolicy,
    JobDefinition,
    JobKind,
    RecordError,
    Skip,
    Succeeded,
)
from leadflow_core.outreach import (
    OutgoingEmail,
    OutgoingSms,
    SmtpMailer,
    TwilioSmsGateway,
    is_valid_email,
    is_valid_phone_number,
    personalize,
)
from leadflow_core.util.errors import FatalJobError, SourceError, StoreUnavailableError
from leadflow_worker.settings import get_smtp_config, get_twilio_config

logger = structlog.get_logger()

IMPORT_BATCH = BatchPolicy(size=500, delay_seconds=0)
SEND_BATCH = BatchPolicy(size=50, delay_seconds=1.0)

IMPORT_KEY_COLUMN = "email"


def build_import_job(
    file_path: str,
    format_name: str | None = None,
    policy: BatchPolicy = IMPORT_BATCH,
    filename: str | None = None,
    delete_after: bool = True,
) -> JobDefinition:
    """Import contacts from a CSV, TSV or XLSX file.

    Emails are the natural key: a key seen earlier in the same file, or already
    in the contact store, is skipped. Rows are written 500 at a time.
    """
    seen: set[str] = set()

    def load():
        fmt = format_name or detect_format(file_path)
        if not fmt:
            raise SourceError("Unsupported or unrecognized file format")
        require_columns(read_columns(file_path, fmt), [IMPORT_KEY_COLUMN])
        return load_records(file_path, fmt)

    def classify(row: dict, index: int):
        row_no = index + 2  # header is row 1
        if is_malformed(row):
            return RecordError(f"Row {row_no}: Malformed row (more fields than the header)")
        if is_blank(row):
            return Skip(f"Row {row_no}: Blank row")
        email = (row.get(IMPORT_KEY_COLUMN) or "").strip()
        if not email:
            return RecordError(f"Row {row_no}: Email is required")
        if not is_valid_email(email):
            return RecordError(f"Row {row_no}: Invalid email address - {email}")
        key = email_key(email)
        if key in seen:
            return Skip(f"Row {row_no}: Duplicate email in file - {email}")
        try:
            contact = contact_from_row(row)
        except ValueError as e:
            return RecordError(f"Row {row_no}: {e}")
        if find_by_email(email) is not None:
            return Skip(f"Row {row_no}: Email already exists - {email}")
        seen.add(key)
        return Accept(contact)

    def flush(batch: list[Contact]):
        inserted = save_all(batch)
        return [
            Succeeded(c) if ok else Skip(f"Email already exists - {c.email}")
            for c, ok in zip(batch, inserted)
        ]

    def on_finish():
        if delete_after and os.path.exists(file_path):
            os.remove(file_path)

    return JobDefinition(
        kind=JobKind.IMPORT,
        load=load,
        classify=classify,
        flush=flush,
        policy=policy,
        on_finish=on_finish,
        meta={"filename": filename or Path(file_path).name, "format": format_name},
    )


def _recipients(filters: ContactFilters | None) -> list[Contact]:
    contacts = find_by_filters(filters)
    logger.info("campaign_recipients_loaded", count=len(contacts), filters=filters.active() if filters else {})
    return contacts


def _record_reached(batch: list[Contact], errors: list[str | None], channel: str) -> None:
    """Bump contact counts for delivered messages.

    The messages are already out, so a store failure here is logged and the
    sends still count as succeeded.
    """
    ids = [c.id for c, err in zip(batch, errors) if err is None]
    try:
        record_contacts(ids, channel)
    except StoreUnavailableError as e:
        logger.error("contact_counts_not_recorded", channel=channel, contacts=len(ids), error=str(e))


def build_email_campaign(
    subject: str,
    body: str,
    filters: ContactFilters | None = None,
    mailer: SmtpMailer | None = None,
    policy: BatchPolicy = SEND_BATCH,
) -> JobDefinition:
    """Send a personalized email to every opted-in contact matching the filters."""
    mailer = mailer or SmtpMailer(get_smtp_config())

    def load():
        if not mailer.is_configured:
            raise FatalJobError("SMTP is not configured")
        return _recipients(filters)

    def classify(contact: Contact, index: int):
        if not contact.email_opted_in:
            return Skip(f"{contact.full_name} has not opted in for email")
        if not (contact.email or "").strip():
            return Skip(f"{contact.full_name} has no email address")
        if not is_valid_email(contact.email):
            return RecordError(f"Invalid email address for {contact.full_name}: {contact.email}")
        return Accept(contact)

    def flush(batch: list[Contact]):
        errors = mailer.send_batch(
            [
                OutgoingEmail(
                    to=c.email.strip(),
                    subject=personalize(subject, c),
                    body=personalize(body, c),
                )
                for c in batch
            ]
        )
        _record_reached(batch, errors, "email")
        return [Succeeded(c) if err is None else RecordError(err) for c, err in zip(batch, errors)]

    return JobDefinition(
        kind=JobKind.EMAIL,
        load=load,
        classify=classify,
        flush=flush,
        policy=policy,
        meta={"subject": subject, "filters": filters.active() if filters else {}},
    )


def build_sms_campaign(
    body: str,
    filters: ContactFilters | None = None,
    gateway: TwilioSmsGateway | None = None,
    policy: BatchPolicy = SEND_BATCH,
) -> JobDefinition:
    """Text every opted-in contact matching the filters."""
    gateway = gateway or TwilioSmsGateway(get_twilio_config())

    def load():
        if not gateway.is_configured:
            raise FatalJobError("Twilio is not configured")
        return _recipients(filters)

    def classify(contact: Contact, index: int):
        if not contact.sms_opted_in:
            return Skip(f"{contact.full_name} has not opted in for SMS")
        if not (contact.phone_number or "").strip():
            return Skip(f"{contact.full_name} has no phone number")
        if not is_valid_phone_number(contact.phone_number):
            return RecordError(f"Invalid phone number format for {contact.full_name}: {contact.phone_number}")
        return Accept(contact)

    def flush(batch: list[Contact]):
        errors = gateway.send_batch(
            [OutgoingSms(to=c.phone_number, body=personalize(body, c)) for c in batch]
        )
        _record_reached(batch, errors, "sms")
        return [Succeeded(c) if err is None else RecordError(err) for c, err in zip(batch, errors)]

    return JobDefinition(
        kind=JobKind.SMS,
        load=load,
        classify=classify,
        flush=flush,
        policy=policy,
        meta={"filters": filters.active() if filters else {}},
    )
