"""
Database configuration with lazy initialization.

The engine is created on first access so the app can import (and answer
health checks) before the database is reachable.
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import QueuePool, StaticPool

from .core.config import settings

logger = logging.getLogger(__name__)

# Global engine instance (lazily initialized)
_engine = None
_SessionLocal = None

Base = declarative_base()


def build_engine(database_url: str):
    """Create an engine with pooling suited to the backend."""
    if database_url.startswith("sqlite"):
        if ":memory:" in database_url:
            # One shared connection so every session sees the same in-memory schema
            return create_engine(
                database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        return create_engine(
            database_url,
            poolclass=QueuePool,
            pool_size=5,
            max_overflow=0,
            connect_args={"check_same_thread": False},
        )
    # PostgreSQL: Production-ready pooling
    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def get_engine():
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        if settings.is_prod and settings.database_url.startswith("sqlite"):
            error_msg = "CRITICAL: SQLite database is not supported in production."
            logger.error(error_msg)
            raise ValueError(error_msg)

        db_url_safe = settings.database_url[:30] + "..." if len(settings.database_url) > 30 else settings.database_url
        logger.info(f"[DB] Creating database engine for: {db_url_safe}")
        _engine = build_engine(settings.database_url)
    return _engine


def get_session_local():
    """Get or create the SessionLocal class."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def init_db():
    """Create tables for SQLite deployments; PostgreSQL is migrated by Alembic."""
    from . import models  # noqa: F401  register models with Base

    engine = get_engine()
    if engine.dialect.name == "sqlite":
        Base.metadata.create_all(bind=engine)
        logger.info("[DB] SQLite schema ensured")


def get_db():
    """
    Dependency that provides a database session.
    Used by FastAPI's dependency injection.
    """
    session_class = get_session_local()
    db = session_class()
    try:
        yield db
    finally:
        db.close()


def dialect_insert(db):
    """
    Return the dialect-specific ``insert`` construct supporting
    ON CONFLICT upserts, or None when the backend has no such clause.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    return None
