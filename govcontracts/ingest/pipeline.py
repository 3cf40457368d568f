"""GovContracts — Ingestion Run Orchestrator.

Runs the full data flow once:
  validate config → ensure schema → fetch → store raw → log audit → report totals

Only configuration and schema failures abort a run. A failed fetch is
recorded in both tables like any other outcome, and a failed write to one
table never prevents the write to the other.
"""

import time
from datetime import date
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError
from sqlmodel import Session

from govcontracts.config import Settings
from govcontracts.connectors.sam.client import SamClient, build_request, resolve_window
from govcontracts.core.errors import (
    ConfigError,
    ReadError,
    SchemaError,
    StoreWriteError,
)
from govcontracts.core.logging import get_logger
from govcontracts.database import create_db_engine
from govcontracts.models.run_models import RunReport, RunState
from govcontracts.storage.audit_log import write_audit
from govcontracts.storage.raw_store import count_raw_records, write_raw
from govcontracts.storage.schema import ensure_schema

logger = get_logger("ingest.pipeline")


def _advance(report: RunReport, state: RunState) -> None:
    report.state = state
    logger.debug(f"Run state → {state.value}", extra={"state": state.value})


def _abort(report: RunReport, error: Exception) -> RunReport:
    report.state = RunState.ABORTED
    report.error = str(error)
    logger.error(
        f"Run aborted: {error}",
        extra={"state": RunState.ABORTED.value, "error_kind": type(error).__name__},
    )
    return report


async def run_ingestion(
    settings: Settings,
    engine: Optional[Engine] = None,
    client: Optional[SamClient] = None,
    today: Optional[date] = None,
) -> RunReport:
    """Execute one ingestion run and return its report. Never raises IngestError."""
    report = RunReport()
    started = time.monotonic()

    # ── Step 0: Configuration (before any network or database activity) ──
    owns_engine = engine is None
    try:
        api_key = settings.require_api_key()
        if owns_engine:
            db_url = settings.resolved_database_url()
            try:
                engine = create_db_engine(db_url)
            except ArgumentError as e:
                raise ConfigError(f"DATABASE_URL is not usable: {e}") from e
    except ConfigError as e:
        return _abort(report, e)

    owns_client = client is None
    client = client or SamClient()

    try:
        with Session(engine) as session:
            # ── Step 1: Schema ──
            try:
                ensure_schema(session)
            except SchemaError as e:
                return _abort(report, e)
            _advance(report, RunState.SCHEMA_READY)

            # ── Step 2: Fetch ──
            window = resolve_window(settings.posted_from, settings.posted_to, today)
            request = build_request(
                api_key, window, settings.sam_base_url, settings.sam_page_limit
            )
            outcome = await client.execute(request)
            report.window = window
            report.outcome = outcome
            _advance(report, RunState.FETCHED)

            # ── Step 3: Raw store ──
            try:
                report.raw_rows_written = write_raw(
                    session, outcome, settings.source_name
                )
            except StoreWriteError as e:
                report.raw_error = str(e)
                logger.error(str(e), extra={"table": e.table})
            _advance(report, RunState.RAW_PERSISTED)

            # ── Step 4: Audit log ──
            try:
                write_audit(session, outcome, window, settings.source_name)
            except StoreWriteError as e:
                report.audit_error = str(e)
                logger.error(str(e), extra={"table": e.table})
            _advance(report, RunState.AUDIT_PERSISTED)

            # ── Step 5: Totals (best effort) ──
            try:
                report.total_raw_rows = count_raw_records(session)
                logger.info(
                    f"📊 Total rows in raw store: {report.total_raw_rows}",
                    extra={"rows": report.total_raw_rows},
                )
            except ReadError as e:
                logger.warning(str(e))
            _advance(report, RunState.REPORTED)
    finally:
        if owns_client:
            await client.close()
        if owns_engine:
            engine.dispose()

    logger.info(
        f"Run complete. Fetch success: {outcome.is_success}",
        extra={
            "state": report.state.value,
            "status_code": outcome.status_code_text,
            "duration_ms": round((time.monotonic() - started) * 1000),
        },
    )
    return report
