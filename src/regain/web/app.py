"""FastAPI application for the regain JSON API."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from .. import __version__
from ..db.engine import get_db_path, init_db
from .routers import catalog, plans, profiles, progress

logger = logging.getLogger(__name__)


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Database to serve; defaults to the configured data directory
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler - runs on startup and shutdown."""
        await init_db(app.state.db_path)
        logger.info("Serving database %s", app.state.db_path)
        yield

    app = FastAPI(
        title="regain",
        description="Progressive-overload session planner with streak tracking",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.db_path = db_path or get_db_path()

    app.include_router(catalog.router)
    app.include_router(profiles.router)
    app.include_router(plans.router)
    app.include_router(progress.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
