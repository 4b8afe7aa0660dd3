"""
Sermon Planner schema status service.

Exposes database health and the migration/verification state of the schema.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from sermon_planner import __version__
from sermon_planner.config import get_settings
from sermon_planner.db.session import check_db_connection, engine
from sermon_planner.migrations import get_current_revision, get_head_revision
from sermon_planner.schema.verify import verify_schema
from sermon_planner.schemas.status import SchemaStatusRead, TableStatusRead

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Sermon Planner starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise
        yield
    finally:
        logger.info("Sermon Planner shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity and reports the schema revision."""
        try:
            with engine.connect() as conn:
                revision = get_current_revision(conn)
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
                "revision": revision,
            }
        except Exception:
            logger.exception("Health check failed")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                    "revision": None,
                },
            )

    @app.get("/api/schema/status", response_model=SchemaStatusRead, tags=["schema"])
    def schema_status() -> SchemaStatusRead:
        """Verify required tables and report revision, row and index counts."""
        with engine.connect() as conn:
            report = verify_schema(conn)
        head = get_head_revision()
        return SchemaStatusRead(
            ok=report.ok,
            revision=report.revision,
            head=head,
            up_to_date=report.revision == head,
            missing_tables=report.missing_tables,
            tables=[TableStatusRead.model_validate(t) for t in report.tables],
            trigger_count=report.trigger_count,
        )

    return app


app = create_app()
