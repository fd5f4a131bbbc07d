"""Tests for the contact import job."""
import os

import openpyxl

from leadflow_core.contacts import Contact, count_contacts, find_by_email, save_all
from leadflow_core.jobs import BatchPolicy, JobState
from leadflow_worker import tasks
from leadflow_worker.tasks import build_import_job

HEADER = ["First Name", "Last Name", "Email"]


def _run(registry, path, **kw):
    job_id = registry.submit(build_import_job(path, **kw))
    return registry.wait(job_id, timeout=30)


def test_import_counts_missing_key_as_error(registry, write_csv):
    path = write_csv(
        "contacts.csv",
        HEADER,
        [["Ann", "Lee", "ann@example.com"], ["Bob", "Ray", ""], ["Cat", "Moe", "cat@example.com"]],
    )
    snap = _run(registry, path)
    assert snap.status == JobState.COMPLETED
    assert (snap.total, snap.succeeded, snap.errored, snap.skipped) == (3, 2, 1, 0)
    assert snap.recent_errors == ("Row 3: Email is required",)
    assert count_contacts() == 2


def test_import_skips_repeated_keys(registry, write_csv):
    rows = []
    for i in range(500):
        n = i - 1 if (i + 1) % 50 == 0 else i
        rows.append(["First", "Last", f"user{n}@example.com"])
    path = write_csv("big.csv", HEADER, rows)

    snap = _run(registry, path)
    assert snap.status == JobState.COMPLETED
    assert snap.processed == 500
    assert snap.succeeded == 490
    assert snap.skipped == 10
    assert snap.errored == 0
    assert count_contacts() == 490


def test_import_skips_keys_already_stored(registry, write_csv):
    save_all([Contact(first_name="Old", last_name="Timer", email="ann@example.com")])
    path = write_csv("contacts.csv", HEADER, [["Ann", "Lee", "ANN@example.com"], ["Bob", "Ray", "bob@example.com"]])
    snap = _run(registry, path)
    assert (snap.succeeded, snap.skipped) == (1, 1)
    assert find_by_email("ann@example.com").first_name == "Old"


def test_import_without_header_fails(registry, write_csv):
    path = write_csv("noheader.csv", ["ann@example.com", "Ann", "Lee"], [["bob@example.com", "Bob", "Ray"]])
    snap = _run(registry, path)
    assert snap.status == JobState.FAILED
    assert snap.processed == 0
    assert "email" in snap.error_message


def test_import_empty_file_fails(registry, tmp_path):
    p = tmp_path / "empty.csv"
    p.write_text("")
    snap = _run(registry, str(p))
    assert snap.status == JobState.FAILED
    assert snap.error_message


def test_import_unknown_format_fails(registry, tmp_path):
    p = tmp_path / "contacts.pdf"
    p.write_text("%PDF-1.4")
    snap = _run(registry, str(p), delete_after=False)
    assert snap.status == JobState.FAILED
    assert "format" in snap.error_message


def test_import_row_errors_do_not_stop_job(registry, write_csv):
    path = write_csv(
        "contacts.csv",
        ["email", "first name", "last name"],
        [["not-an-email", "A", "B"], ["c@example.com", "", "D"], ["e@example.com", "E", "F"]],
    )
    snap = _run(registry, path)
    assert snap.status == JobState.COMPLETED
    assert (snap.succeeded, snap.errored) == (1, 2)
    assert snap.recent_errors == (
        "Row 2: Invalid email address - not-an-email",
        "Row 3: First name, last name, and email are required",
    )


def test_import_xlsx_in_batches(registry, tmp_path):
    p = tmp_path / "contacts.xlsx"
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(["Email", "Last Name", "First Name", "SMS Opted In", "Phone"])
    for i in range(12):
        ws.append([f"u{i}@example.com", "Last", "First", "yes", "+15125550100"])
    wb.save(p)

    snap = _run(registry, str(p), policy=BatchPolicy(size=5, delay_seconds=0))
    assert snap.status == JobState.COMPLETED
    assert snap.succeeded == 12
    assert find_by_email("u3@example.com").sms_opted_in is True


def test_import_removes_upload(registry, write_csv):
    path = write_csv("contacts.csv", HEADER, [["Ann", "Lee", "ann@example.com"]])
    _run(registry, path)
    assert not os.path.exists(path)


def test_import_reports_malformed_and_blank_rows(registry, tmp_path):
    p = tmp_path / "contacts.csv"
    p.write_text(
        "First Name,Last Name,Email\n"
        "Ann,Lee,ann@example.com\n"
        "Bob,Ray,bob@example.com,extra,more\n"
        "\n"
        "Cat,Moe,cat@example.com\n"
    )
    snap = _run(registry, str(p))
    assert snap.status == JobState.COMPLETED
    assert (snap.total, snap.succeeded, snap.errored, snap.skipped) == (4, 2, 1, 1)
    assert snap.recent_errors == ("Row 3: Malformed row (more fields than the header)",)
    assert find_by_email("bob@example.com") is None


def test_import_malformed_first_row(registry, tmp_path):
    p = tmp_path / "contacts.csv"
    p.write_text("email,first name,last name\na@example.com,A,B,extra\nb@example.com,B,C\n")
    snap = _run(registry, str(p))
    assert (snap.total, snap.succeeded, snap.errored) == (2, 1, 1)
    assert find_by_email("b@example.com").first_name == "B"


def test_import_comma_delimited_txt(registry, write_csv):
    path = write_csv("contacts.txt", HEADER, [["Ann", "Lee", "ann@example.com"]])
    snap = _run(registry, path)
    assert snap.status == JobState.COMPLETED
    assert snap.succeeded == 1


def test_import_key_stored_by_another_job_before_flush(registry, write_csv, monkeypatch):
    real_save_all = tasks.save_all

    def save_after_competing_insert(batch):
        real_save_all([Contact(first_name="Other", last_name="Job", email="ANN@example.com")])
        return real_save_all(batch)

    monkeypatch.setattr(tasks, "save_all", save_after_competing_insert)
    path = write_csv("contacts.csv", HEADER, [["Ann", "Lee", "ann@example.com"], ["Bob", "Ray", "bob@example.com"]])

    snap = _run(registry, path)
    assert snap.status == JobState.COMPLETED
    assert (snap.succeeded, snap.skipped, snap.errored) == (1, 1, 0)
    assert snap.recent_errors == ()
    assert find_by_email("ann@example.com").first_name == "Other"
    assert count_contacts() == 2
