"""GovContracts — Raw store writer.

One append-only row per run holding the response body exactly as received.
"""

from sqlalchemy import Text, cast, func, insert, literal
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from govcontracts.core.errors import ReadError, StoreWriteError
from govcontracts.core.logging import get_logger
from govcontracts.models.raw_models import (
    STATUS_FAILED,
    STATUS_SUCCESS,
    RawOpportunityData,
)
from govcontracts.models.run_models import FetchOutcome

logger = get_logger("storage.raw_store")

FAILED_FETCH_MESSAGE = "API request failed; see api_fetch_log for the status code"


def _payload_value(session: Session, body: str):
    # PostgreSQL parses the text into JSONB itself; malformed bodies are
    # rejected there and surface as StoreWriteError.
    if session.get_bind().dialect.name == "postgresql":
        return cast(literal(body, type_=Text), JSONB)
    return body


def write_raw(session: Session, outcome: FetchOutcome, source_name: str) -> int:
    """Append the run's response body. Returns the number of rows written."""
    status = STATUS_SUCCESS if outcome.is_success else STATUS_FAILED
    stmt = insert(RawOpportunityData).values(
        source_name=source_name,
        raw_payload=_payload_value(session, outcome.body),
        status=status,
        error_message=None if outcome.is_success else FAILED_FETCH_MESSAGE,
    )

    try:
        result = session.connection().execute(stmt)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError(
            f"Insert into {RawOpportunityData.__tablename__} failed: {e}",
            table=RawOpportunityData.__tablename__,
        ) from e

    rows = result.rowcount
    logger.info(
        f"Stored raw payload with status {status}",
        extra={"rows": rows, "table": RawOpportunityData.__tablename__},
    )
    return rows


def count_raw_records(session: Session) -> int:
    """Total rows in the raw store."""
    try:
        return session.exec(
            select(func.count()).select_from(RawOpportunityData)
        ).one()
    except SQLAlchemyError as e:
        session.rollback()
        raise ReadError(f"Count of {RawOpportunityData.__tablename__} failed: {e}") from e
