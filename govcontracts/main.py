"""GovContracts — FastAPI Application Entry Point.

Read-only view over the ingestion tables. Ingestion itself runs from the
command line (`python -m govcontracts run`), invoked by cron.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from sqlalchemy.engine import Engine
from sqlmodel import Session

from govcontracts.api.fetch_log_routes import router as fetch_log_router
from govcontracts.core.errors import SchemaError
from govcontracts.core.logging import get_logger
from govcontracts.database import backend_name, check_connection, get_engine, mask_url
from govcontracts.storage.schema import ensure_schema

logger = get_logger("main")

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 GovContracts API starting up...")
    engine = get_engine()
    if check_connection(engine):
        with Session(engine) as session:
            try:
                ensure_schema(session)
            except SchemaError as e:
                logger.error(f"❌ {e}")
    else:
        logger.error("❌ Database NOT connected — endpoints will fail")
    yield
    engine.dispose()
    logger.info("GovContracts API shut down")


app = FastAPI(
    title="GovContracts",
    description="Raw landing stage for SAM.gov contract opportunities — fetch log and raw store inspection.",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Routers
app.include_router(fetch_log_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "govcontracts",
        "version": APP_VERSION,
    }


@app.get("/debug/db", tags=["System"])
async def debug_db(engine: Engine = Depends(get_engine)):
    """Debug endpoint — check database connectivity."""
    url = engine.url.render_as_string(hide_password=False)
    return {
        "connected": check_connection(engine),
        "backend": backend_name(url),
        "url": mask_url(url),
    }
