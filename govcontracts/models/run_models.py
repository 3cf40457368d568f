"""GovContracts — Run Models (fetch outcome, run state, run report)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

TRANSPORT_ERROR_STATUS = "ERROR"


class PostedWindow(BaseModel):
    """postedFrom / postedTo pair, exactly as sent to the API."""

    posted_from: str
    posted_to: str


class FetchOutcome(BaseModel):
    """Result of the single API call of a run."""

    status_code: Optional[int] = None
    """None when the transport failed before any status was received."""
    body: str = ""
    is_success: bool = False
    transport_error: Optional[str] = None

    @property
    def status_code_text(self) -> str:
        if self.status_code is None:
            return TRANSPORT_ERROR_STATUS
        return str(self.status_code)


class RunState(str, Enum):
    INIT = "Init"
    SCHEMA_READY = "SchemaReady"
    FETCHED = "Fetched"
    RAW_PERSISTED = "RawPersisted"
    AUDIT_PERSISTED = "AuditPersisted"
    REPORTED = "Reported"
    ABORTED = "Aborted"


class RunReport(BaseModel):
    """What happened during one run. Returned by the orchestrator, never raised."""

    state: RunState = RunState.INIT
    window: Optional[PostedWindow] = None
    outcome: Optional[FetchOutcome] = None
    raw_rows_written: int = 0
    raw_error: Optional[str] = None
    audit_error: Optional[str] = None
    total_raw_rows: Optional[int] = None
    error: Optional[str] = None
    """Reason for an Aborted run."""

    @property
    def aborted(self) -> bool:
        return self.state == RunState.ABORTED
