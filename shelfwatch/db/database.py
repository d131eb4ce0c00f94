"""
==============================================================================
Database Connection Management Module
==============================================================================

Database connection management using SQLAlchemy.

This module implements:
- DatabaseManager: owns the engine and session factory for one database URL
- Session scope with commit/rollback handling
- Connection pooling configuration

One DatabaseManager is constructed at startup and handed to the
ProductStore; nothing in the package reaches for a process-wide handle.

SQLAlchemy Architecture:
-----------------------
    ┌─────────────────┐
    │ DatabaseManager │ (built at startup)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │     Engine      │ (Connection pool)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │  SessionLocal   │ (Session factory)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Session      │ (per store operation)
    └─────────────────┘

SQLite Note:
-----------
The API thread pool and the scan worker thread share the engine, so
'check_same_thread' is disabled. In-memory URLs use StaticPool so every
session sees the same database.

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


# Module logger
logger = logging.getLogger(__name__)

# SQLAlchemy declarative base for all models
Base = declarative_base()

_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


class DatabaseManager:
    """
    Database connection manager for a single URL.

    The engine is created lazily on first access.

    Attributes:
        _database_url: SQLAlchemy connection string
        _echo: Log emitted SQL
        _engine: SQLAlchemy engine instance (lazy loaded)
        _session_factory: Session factory for creating sessions

    Example:
        >>> db_manager = DatabaseManager("sqlite://")
        >>> db_manager.create_tables()
        >>> with db_manager.session_scope() as session:
        ...     session.query(Product).count()
        0
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self._database_url = database_url
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    # =========================================================================
    # ENGINE MANAGEMENT
    # =========================================================================

    @property
    def engine(self) -> Engine:
        """Get the SQLAlchemy engine, creating it on first access."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """
        Create the SQLAlchemy engine with appropriate configuration.

        - SQLite: disables check_same_thread, StaticPool for in-memory URLs
        - PostgreSQL/MySQL: connection pooling with pre-ping

        Returns:
            Configured SQLAlchemy Engine
        """
        database_url = self._database_url

        if database_url in _MEMORY_URLS:
            engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=self._echo,
            )
            logger.info("Created in-memory SQLite engine")

        elif database_url.startswith("sqlite"):
            engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                echo=self._echo,
            )
            logger.info(f"Created SQLite engine: {database_url}")

        else:
            engine = create_engine(
                database_url,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=1800,
                pool_pre_ping=True,
                echo=self._echo,
            )
            logger.info(f"Created database engine with pooling: {engine.url.render_as_string(hide_password=True)}")

        return engine

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    @property
    def session_factory(self) -> sessionmaker:
        """Get the session factory, creating it on first access."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,  # Keep objects accessible after commit
            )
        return self._session_factory

    def get_session(self) -> Session:
        """
        Get a new database session.

        The caller is responsible for closing the session.
        """
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success, rolls back on exception, always closes.

        Yields:
            SQLAlchemy Session instance
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # =========================================================================
    # TABLE MANAGEMENT
    # =========================================================================

    def create_tables(self) -> None:
        """Create all tables that don't already exist."""
        # Imported for its side effect of registering the models on Base
        from shelfwatch.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created/verified")

    def drop_tables(self) -> None:
        """
        Drop all tables defined in the models.

        WARNING: This will delete all data! Use only for testing.
        """
        Base.metadata.drop_all(bind=self.engine)
        logger.warning("All database tables dropped")

    # =========================================================================
    # CONNECTION MANAGEMENT
    # =========================================================================

    def verify_connection(self) -> bool:
        """
        Verify database connection is working.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def dispose(self) -> None:
        """Dispose of the connection pool."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database connection pool disposed")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"DatabaseManager(url={self._database_url!r})"
