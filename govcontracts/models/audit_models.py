"""GovContracts — Fetch Audit Log Model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field


class ApiFetchLog(SQLModel, table=True):
    """One row per fetch attempt, successful or not."""

    __tablename__ = "api_fetch_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    source_name: str = Field(max_length=100)
    status_code: str = Field(max_length=20, description="HTTP status or ERROR")
    was_success: bool = Field(default=False)
    posted_from: Optional[str] = Field(
        default=None, max_length=20, description="postedFrom as sent to the API"
    )
    posted_to: Optional[str] = Field(
        default=None, max_length=20, description="postedTo as sent to the API"
    )
    fetched_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), nullable=False, server_default=func.now()
        ),
    )
