"""GovContracts — Fetch audit logger."""

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from govcontracts.core.errors import ReadError, StoreWriteError
from govcontracts.core.logging import get_logger
from govcontracts.models.audit_models import ApiFetchLog
from govcontracts.models.run_models import FetchOutcome, PostedWindow

logger = get_logger("storage.audit_log")


def write_audit(
    session: Session,
    outcome: FetchOutcome,
    window: PostedWindow,
    source_name: str,
) -> None:
    """Append one audit row for the attempt, whatever its outcome."""
    entry = ApiFetchLog(
        source_name=source_name,
        status_code=outcome.status_code_text,
        was_success=outcome.is_success,
        posted_from=window.posted_from,
        posted_to=window.posted_to,
    )
    session.add(entry)

    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError(
            f"Insert into {ApiFetchLog.__tablename__} failed: {e}",
            table=ApiFetchLog.__tablename__,
        ) from e

    logger.info(
        f"Logged fetch attempt (success={outcome.is_success})",
        extra={
            "status_code": outcome.status_code_text,
            "posted_from": window.posted_from,
            "posted_to": window.posted_to,
            "table": ApiFetchLog.__tablename__,
        },
    )


def list_fetch_log(session: Session, limit: int = 50) -> list[ApiFetchLog]:
    """Most recent fetch attempts first."""
    try:
        return list(
            session.exec(
                select(ApiFetchLog).order_by(col(ApiFetchLog.id).desc()).limit(limit)
            ).all()
        )
    except SQLAlchemyError as e:
        session.rollback()
        raise ReadError(f"Read of {ApiFetchLog.__tablename__} failed: {e}") from e
