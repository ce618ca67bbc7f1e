from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from typing_arena.config.settings import settings

# Lazy initialization to avoid import-time database connections
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def _get_engine() -> Engine:
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        logger.info(f"Initializing database engine: {settings.database_url}")
        connect_args = {}
        if "sqlite" in settings.database_url.lower():
            connect_args = {"check_same_thread": False}

        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,  # Set to True for SQL query logging
            pool_pre_ping=True,
        )
        logger.info("Database engine initialized")
    return _engine


def _get_session_local() -> sessionmaker:
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def init_db(engine: Engine | None = None) -> None:
    """Create all tables if they do not exist yet."""
    from typing_arena.db.models import Base

    target = engine or _get_engine()
    Base.metadata.create_all(bind=target)
    logger.info("Database tables verified")


@contextmanager
def session_scope(session_local: sessionmaker) -> Generator[Session, None, None]:
    """Open a session from the given factory, commit on success, roll back on error."""
    logger.debug("Creating new database session")
    session = session_local()
    try:
        yield session
        session.commit()
        logger.debug("Database session committed")
    except Exception as e:
        logger.error(f"Database session error, rolling back: {e}. Error type: {type(e).__name__}")
        session.rollback()
        raise
    finally:
        session.close()
        logger.debug("Database session closed")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get database session context manager bound to the configured engine."""
    with session_scope(_get_session_local()) as session:
        yield session
