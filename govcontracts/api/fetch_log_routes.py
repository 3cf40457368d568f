"""GovContracts — Read-only routes over the audit log and raw store."""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlmodel import Session

from govcontracts.core.errors import ReadError
from govcontracts.core.logging import get_logger
from govcontracts.database import get_session
from govcontracts.storage.audit_log import list_fetch_log
from govcontracts.storage.raw_store import count_raw_records

logger = get_logger("api.fetch_log")

router = APIRouter(tags=["Ingestion"])


class FetchLogEntry(BaseModel):
    """One fetch attempt as recorded in api_fetch_log."""

    id: int
    source_name: str
    status_code: str
    was_success: bool
    posted_from: Optional[str] = None
    posted_to: Optional[str] = None
    fetched_at: Optional[datetime] = None


class FetchLogResponse(BaseModel):
    count: int
    entries: List[FetchLogEntry]


@router.get("/fetch-log", response_model=FetchLogResponse)
async def get_fetch_log(
    limit: int = Query(50, ge=1, le=500),
    session: Session = Depends(get_session),
):
    """Most recent fetch attempts, newest first."""
    try:
        rows = list_fetch_log(session, limit=limit)
    except ReadError as e:
        logger.error(str(e))
        raise HTTPException(status_code=503, detail=str(e))

    entries = [FetchLogEntry.model_validate(row, from_attributes=True) for row in rows]
    return FetchLogResponse(count=len(entries), entries=entries)


@router.get("/raw/count")
async def get_raw_count(session: Session = Depends(get_session)):
    """Total payloads landed in the raw store."""
    try:
        return {"total": count_raw_records(session)}
    except ReadError as e:
        logger.error(str(e))
        raise HTTPException(status_code=503, detail=str(e))
