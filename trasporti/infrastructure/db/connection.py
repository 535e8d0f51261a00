import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlmodel import create_engine, Session, SQLModel
from sqlalchemy import text
from sqlalchemy.pool import StaticPool
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ...core.config import DatabaseSettings
from ...core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

# Import all models here to ensure they're registered with SQLModel.metadata
from . import models  # noqa: E402,F401


class DatabaseManager:
    """
    Store handle with an explicit lifecycle.

    Constructed once by the API lifespan or the import command, opened with
    ``connect()`` and released with ``disconnect()``. Sessions are handed out
    per request or per pipeline step through ``get_session()``.
    """

    def __init__(self, settings: DatabaseSettings):
        self.settings = settings
        self._engine: Optional[Engine] = None
        self._is_connected = False

    def _get_database_config(self) -> dict:
        """Get database configuration based on URL."""
        url = self.settings.url
        config = {
            "echo": self.settings.echo,
            "pool_pre_ping": True,
        }

        if url.startswith("sqlite"):
            config["connect_args"] = {"check_same_thread": False}
            if url == "sqlite://" or ":memory:" in url:
                # one shared connection, otherwise every session sees its own empty database
                config["poolclass"] = StaticPool
        else:
            config.update({
                "pool_size": self.settings.pool_size,
                "max_overflow": self.settings.max_overflow,
                "pool_timeout": self.settings.pool_timeout,
                "pool_recycle": self.settings.pool_recycle,
            })

        return config

    def _create_engine(self) -> Engine:
        if not self.settings.url:
            raise DatabaseError("Store connection string (DATABASE_URL) is not configured", operation="connect")

        try:
            engine = create_engine(self.settings.url, **self._get_database_config())
            logger.info("Database engine created")
            return engine

        except (SQLAlchemyError, ImportError, ValueError) as e:
            logger.error(f"Failed to create database engine: {e}")
            raise DatabaseError(f"Database engine creation failed: {e}", operation="connect") from e

    def get_engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Get database session with automatic cleanup."""
        if not self._is_connected:
            raise DatabaseError("Database is not connected", operation="session")

        session = Session(self.get_engine())

        try:
            yield session
            session.commit()

        except SQLAlchemyError as e:
            logger.error(f"Database session error: {e}")
            session.rollback()
            raise DatabaseError("Database operation failed") from e

        except Exception:
            session.rollback()
            raise

        finally:
            session.close()

    async def connect(self) -> None:
        """Initialize database connection and create tables."""
        logger.info("Connecting to database...")
        engine = self.get_engine()

        try:
            SQLModel.metadata.create_all(bind=engine)
            with Session(engine) as session:
                session.execute(text("SELECT 1")).scalar()

        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            engine.dispose()
            self._engine = None
            raise DatabaseError(f"Database connection failed: {e}", operation="connect") from e

        self._is_connected = True
        logger.info("Database connected successfully")

    async def disconnect(self) -> None:
        """Close database connections."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database disconnected")

        self._engine = None
        self._is_connected = False

    async def health_check(self) -> bool:
        """Check database health and connectivity."""
        try:
            with self.get_session() as session:
                return session.execute(text("SELECT 1")).scalar() == 1
        except DatabaseError as e:
            logger.error(f"Database health check failed: {e}")
            return False

    @property
    def is_connected(self) -> bool:
        return self._is_connected
