import logging
from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.errors import DatabaseInitError

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


class Database:
    """
    Handle on the embedded datastore.

    Owns the SQLAlchemy engine (and with it the connection pool) plus the
    session factory. One instance lives for the whole process: it is opened
    by the application lifespan and closed on shutdown.

    Attributes:
        url: SQLAlchemy database URL
        pool_size: Number of pooled connections kept open
        echo: Log every SQL statement
    """

    def __init__(self, url: str, pool_size: int = 5, echo: bool = False):
        self.url = url
        self.pool_size = pool_size
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def initialize(self) -> None:
        """
        Open the pool, verify the store answers and create missing tables.

        Raises:
            DatabaseInitError: If the store is unreachable or the schema
                cannot be created. Callers treat this as fatal.
        """
        # Register the mapped tables on Base.metadata
        from app.models import product  # noqa: F401

        connect_args = {}
        if self.url.startswith("sqlite"):
            # Pooled connections are shared across the server's worker threads
            connect_args["check_same_thread"] = False

        engine = None
        try:
            engine = create_engine(
                self.url,
                pool_size=self.pool_size,
                pool_pre_ping=True,
                echo=self.echo,
                connect_args=connect_args,
            )
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection established successfully")

            Base.metadata.create_all(bind=engine)
            logger.info("Products table initialized")
        except SQLAlchemyError as e:
            if engine is not None:
                engine.dispose()
            raise DatabaseInitError(f"Failed to initialize database: {e}") from e

        self.engine = engine
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )

    def session(self) -> Session:
        """Create a new ORM session bound to the pool."""
        if self._session_factory is None:
            raise RuntimeError("Database is not initialized")
        return self._session_factory()

    def ping(self) -> bool:
        """Return True if the store answers a trivial query."""
        if self.engine is None:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def clear(self) -> None:
        """Delete every row from every mapped table, keeping the schema."""
        if self.engine is None:
            raise RuntimeError("Database is not initialized")
        with self.engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(table.delete())

    def close(self) -> None:
        """Release the pool. Errors are logged, never raised."""
        if self.engine is None:
            return
        try:
            self.engine.dispose()
            logger.info("Database connection closed")
        except Exception as e:
            logger.error(f"Error closing database connection: {e}")
        finally:
            self.engine = None
            self._session_factory = None


def get_db(request: Request):
    """
    Dependency to get database session.
    Yields a session from the application's datastore and closes it after use.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
