from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

import uvicorn

from app.config import Settings, get_settings
from app.database import Database
from app.errors import DatabaseInitError
from app.api import products, health
from app.api.exception_handlers import register_exception_handlers
from app.schemas.envelope import Envelope

# Configure logging
logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    The datastore is a startup precondition: if it cannot be opened the
    error is logged and re-raised, which aborts the server before it
    accepts any request.
    """
    # Startup
    logger.info("Starting up application...")
    database: Database = app.state.database

    try:
        database.initialize()
    except DatabaseInitError as e:
        logger.critical(f"Cannot start without a database: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down application...")
    database.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings (tests point this at a temporary
            database); defaults to the environment-driven settings.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
        A minimal RESTful CRUD service for products backed by SQLite.

        - **Products**: create, read, replace, partially update and delete
        - **Search**: substring match on product names
        - **Bulk create**: all-or-nothing batch inserts

        Every response is wrapped in `{code, message, data}`; errors carry
        `{code, message}` where `code` mirrors the HTTP status.
        """,
        version=settings.APP_VERSION,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = Database(
        settings.DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        echo=settings.DB_ECHO,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routers
    app.include_router(health.router)
    app.include_router(products.router)

    @app.get("/", tags=["Root"], response_model=Envelope[dict])
    def root():
        """Root endpoint with API information."""
        return Envelope(code=200, data={
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "redoc": "/redoc",
            "health": "/health"
        })

    return app


app = create_app()


def run() -> None:
    """Serve the application on the configured host and port."""
    settings = get_settings()
    logger.info(f"Server is running on http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
