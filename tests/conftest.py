"""Shared fixtures: throwaway SQLite store, explicit settings, mock SAM.gov transport."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest
from sqlmodel import Session

from govcontracts.config import Settings
from govcontracts.connectors.sam.client import SamClient
from govcontracts.database import create_db_engine
from govcontracts.storage.schema import ensure_schema


@pytest.fixture
def engine(tmp_path):
    db_engine = create_db_engine(f"sqlite:///{tmp_path / 'gov_contracts_dw.db'}")
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine):
    """Session over a store whose schema is already in place."""
    with Session(engine) as db_session:
        ensure_schema(db_session)
        yield db_session


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        sam_api_key="test-key",
        database_url=f"sqlite:///{tmp_path / 'settings.db'}",
        posted_from=None,
        posted_to=None,
        environment="development",
    )


@pytest.fixture
def sam_calls() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_client(sam_calls) -> Callable[..., SamClient]:
    """Build a SamClient answering every GET with a canned status/body or exception."""

    def _make(
        status_code: int = 200,
        body: str = '{"opportunitiesData":[]}',
        error: Exception | None = None,
    ) -> SamClient:
        def handler(request: httpx.Request) -> httpx.Response:
            sam_calls.append(request)
            if error is not None:
                raise error
            return httpx.Response(status_code, text=body)

        return SamClient(transport=httpx.MockTransport(handler))

    return _make
