"""GovContracts — Schema bootstrap and additive migrations.

Creates the raw store and audit log tables when missing, then adds any
column introduced after a table's first definition. Safe to run on every
invocation: repeat runs find everything in place and change nothing.
"""

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel

from govcontracts.core.errors import SchemaError
from govcontracts.core.logging import get_logger
from govcontracts.models.audit_models import ApiFetchLog
from govcontracts.models.raw_models import RawOpportunityData

logger = get_logger("storage.schema")

MANAGED_TABLES = (RawOpportunityData.__table__, ApiFetchLog.__table__)

# Columns added after the original table definitions. Always nullable and
# without server defaults, so existing rows are left untouched.
ADDITIVE_COLUMNS: dict[str, tuple[str, ...]] = {
    RawOpportunityData.__tablename__: ("error_message",),
    ApiFetchLog.__tablename__: ("posted_from", "posted_to"),
}


def _add_missing_columns(session: Session) -> list[str]:
    conn = session.connection()
    inspector = inspect(conn)
    preparer = conn.dialect.identifier_preparer
    added: list[str] = []

    for table in MANAGED_TABLES:
        existing = {col["name"] for col in inspector.get_columns(table.name)}
        for name in ADDITIVE_COLUMNS.get(table.name, ()):
            if name in existing:
                continue
            column_type = table.c[name].type.compile(dialect=conn.dialect)
            conn.execute(
                text(
                    f"ALTER TABLE {preparer.quote(table.name)} "
                    f"ADD COLUMN {preparer.quote(name)} {column_type}"
                )
            )
            added.append(f"{table.name}.{name}")
    return added


def ensure_schema(session: Session) -> None:
    """Create both tables if absent and apply pending column additions.

    Raises:
        SchemaError: any DDL or inspection failure. Nothing is retried.
    """
    try:
        SQLModel.metadata.create_all(
            session.connection(), tables=list(MANAGED_TABLES)
        )
        added = _add_missing_columns(session)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise SchemaError(f"Schema bootstrap failed: {e}") from e

    if added:
        logger.info(f"🔨 Added columns: {', '.join(added)}")
    logger.info("✅ Database tables ready")
