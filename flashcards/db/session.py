"""Database session and engine management."""
from __future__ import annotations

from typing import Any

from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool

from flashcards.config import settings


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on ``ON DELETE CASCADE`` and FK checks for every SQLite connection."""

    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, **overrides: Any) -> Engine:
    """Create an engine with pooling suited to the target database."""

    options: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.DATABASE_ECHO}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            poolclass=QueuePool,
            pool_size=10,
            max_overflow=20,
            pool_recycle=3600,  # Recycle connections after 1 hour
        )
    options.update(overrides)
    engine = create_engine(url, **options)
    enable_sqlite_foreign_keys(engine)
    return engine


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Keep objects usable after commit
)


def get_db():
    """Yield a database session for request lifecycle."""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()
