"""GovContracts — Raw Data Models (Immutable)."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Column, DateTime, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import SQLModel, Field

# JSONB on PostgreSQL, plain text on every other backend.
PAYLOAD_TYPE = Text().with_variant(JSONB(), "postgresql")

STATUS_SUCCESS = "Success"
STATUS_FAILED = "Failed"


class RawOpportunityData(SQLModel, table=True):
    """Immutable raw response from the SAM.gov opportunities API.

    Never modify this data — it's the landing copy for downstream ETL.
    """

    __tablename__ = "raw_sam_opportunities"

    id: Optional[int] = Field(default=None, primary_key=True)
    source_name: str = Field(max_length=100, description="Origin system, e.g. SAM.gov")
    raw_payload: Any = Field(
        sa_column=Column(PAYLOAD_TYPE, nullable=False),
        description="Full response body exactly as received",
    )
    status: str = Field(max_length=20, description="Success | Failed")
    error_message: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Generic failure marker; NULL on success",
    )
    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), nullable=False, server_default=func.now()
        ),
    )
