# src/tide/web/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tide import __version__
from tide.canon import Database, WorldDetailsService, create_database
from tide.core.logging import get_logger

from .routes import router

logger = get_logger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    """Build the application around ``database`` (configured store by default)."""

    db = database or create_database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await db.ensure_schema()
        logger.info("World details service ready on %s", db.dialect)
        try:
            yield
        finally:
            await db.dispose()

    # Create the FastAPI application
    app = FastAPI(
        title="Tide World Details",
        description="Persistence API for world details, collections and catalogs",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = db
    app.state.service = WorldDetailsService(db)

    # Include routes
    app.include_router(router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn

    from tide.core import init_logging
    from tide.core.env import reload_config

    settings = reload_config()
    init_logging()
    uvicorn.run(
        create_app(create_database(settings.database)),
        host=settings.system.host,
        port=settings.system.port,
    )
