"""GovContracts — Command line entry point.

Usage:
    python -m govcontracts run          # one ingestion run (cron target)
    python -m govcontracts check-db     # SELECT 1 against DATABASE_URL
    python -m govcontracts serve        # read-only inspection API
"""

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import ArgumentError

from govcontracts.config import Settings, get_settings
from govcontracts.core.errors import ConfigError
from govcontracts.database import check_connection, create_db_engine
from govcontracts.ingest.pipeline import run_ingestion


def _load_settings() -> Optional[Settings]:
    try:
        return get_settings()
    except ValidationError as e:
        print(f"ConfigError: invalid settings\n{e}", file=sys.stderr)
        return None


def _run_command(args: argparse.Namespace) -> int:
    settings = _load_settings()
    if settings is None:
        return 1
    report = asyncio.run(run_ingestion(settings))
    print(report.model_dump_json(indent=2))
    return 1 if report.aborted else 0


def _check_db_command(args: argparse.Namespace) -> int:
    settings = _load_settings()
    if settings is None:
        return 1
    try:
        engine = create_db_engine(settings.resolved_database_url())
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 1
    except ArgumentError as e:
        print(f"ConfigError: DATABASE_URL is not usable: {e}", file=sys.stderr)
        return 1
    try:
        return 0 if check_connection(engine) else 1
    finally:
        engine.dispose()


def _serve_command(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("govcontracts.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="govcontracts",
        description="Land SAM.gov opportunities into the raw store.",
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Fetch once and persist raw + audit rows")
    run_parser.set_defaults(handler=_run_command)

    check_parser = subparsers.add_parser("check-db", help="Test the database connection")
    check_parser.set_defaults(handler=_check_db_command)

    serve_parser = subparsers.add_parser("serve", help="Serve the read-only inspection API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(handler=_serve_command)

    parser.set_defaults(handler=_run_command)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
