"""Unit tests for the fetch audit logger."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlmodel import select

from govcontracts.core.errors import StoreWriteError
from govcontracts.models.audit_models import ApiFetchLog
from govcontracts.models.run_models import FetchOutcome, PostedWindow
from govcontracts.storage.audit_log import list_fetch_log, write_audit

WINDOW = PostedWindow(posted_from="02/15/2026", posted_to="02/22/2026")


def test_write_audit_records_success(session) -> None:
    """A 200 outcome should be logged with its status and window."""
    write_audit(session, FetchOutcome(status_code=200, body="{}", is_success=True), WINDOW, "SAM.gov")

    entry = session.exec(select(ApiFetchLog)).one()

    assert entry.source_name == "SAM.gov"
    assert entry.status_code == "200"
    assert entry.was_success is True
    assert entry.posted_from == "02/15/2026"
    assert entry.posted_to == "02/22/2026"
    assert entry.fetched_at is not None


def test_write_audit_records_transport_failure_sentinel(session) -> None:
    """No status ever received should be logged as ERROR."""
    outcome = FetchOutcome(status_code=None, is_success=False, transport_error="timed out")

    write_audit(session, outcome, WINDOW, "SAM.gov")
    entry = session.exec(select(ApiFetchLog)).one()

    assert entry.status_code == "ERROR"
    assert entry.was_success is False


def test_write_audit_records_error_status(session) -> None:
    """A completed call with a non-2xx status is still a failed attempt."""
    write_audit(session, FetchOutcome(status_code=429, body="slow down", is_success=False), WINDOW, "SAM.gov")

    entry = session.exec(select(ApiFetchLog)).one()

    assert (entry.status_code, entry.was_success) == ("429", False)


def test_write_audit_raises_store_write_error(session) -> None:
    """Insert failures should be classified and name the table."""
    session.connection().execute(text("DROP TABLE api_fetch_log"))
    session.commit()

    with pytest.raises(StoreWriteError) as exc_info:
        write_audit(session, FetchOutcome(status_code=200, is_success=True), WINDOW, "SAM.gov")

    assert exc_info.value.table == "api_fetch_log"


def test_list_fetch_log_newest_first_with_limit(session) -> None:
    """Listing should return the latest attempts first and honor the limit."""
    for code in (200, 500, 404):
        write_audit(session, FetchOutcome(status_code=code, is_success=code == 200), WINDOW, "SAM.gov")

    entries = list_fetch_log(session, limit=2)

    assert [e.status_code for e in entries] == ["404", "500"]
