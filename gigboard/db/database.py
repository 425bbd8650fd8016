"""
Database connection and session management for Gigboard Service.
"""

import logging
from contextlib import contextmanager
from typing import Generator
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..models import Base

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """
    Database connection manager for Gigboard Service.
    Handles connection pooling and session management.
    """

    def __init__(self):
        self.engine = None
        self.SessionLocal = None
        self._initialized = False

    def initialize(self, database_url: str):
        """
        Initialize database connection.

        Args:
            database_url: Database connection URL
        """
        try:
            if database_url.startswith("sqlite"):
                self.engine = create_engine(
                    database_url,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                    echo=False
                )
                self._setup_sqlite_pragmas()
            else:
                self.engine = create_engine(
                    database_url,
                    pool_size=10,
                    max_overflow=20,
                    pool_pre_ping=True,
                    pool_recycle=300,
                    echo=False
                )

            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.engine
            )

            self._initialized = True
            logger.info("Database connection initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database connection: {e}")
            raise

    def _setup_sqlite_pragmas(self):
        @event.listens_for(self.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get database session.

        Yields:
            SQLAlchemy database session
        """
        if not self._initialized:
            raise RuntimeError("Database not initialized")

        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()

    def create_tables(self):
        """Create all database tables."""
        if not self._initialized:
            raise RuntimeError("Database not initialized")

        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Failed to create database tables: {e}")
            raise

    def health_check(self) -> bool:
        """
        Check database health.

        Returns:
            True if database is healthy
        """
        if not self._initialized:
            return False

        try:
            session = self.SessionLocal()
            try:
                session.execute(text("SELECT 1"))
                return True
            finally:
                session.close()
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connections closed")


@contextmanager
def transaction(session: Session) -> Generator[Session, None, None]:
    """
    Run a unit of work as one transaction.
    Commits on success; rolls back and re-raises on any exception so that
    no partial writes survive a failed mutation.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
