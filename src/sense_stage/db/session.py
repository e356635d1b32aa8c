"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from sense_stage.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import sense_stage.models  # noqa: E402,F401


def _connect_args(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    if url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={settings.db_statement_timeout_ms}"}
    return {}


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """Turn on FK enforcement so ON DELETE CASCADE behaves as on PostgreSQL."""

    @event.listens_for(target, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:  # pragma: no cover
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, **kwargs: Any) -> Engine:
    """Create an engine for ``url`` with the project's connection defaults."""
    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": settings.sql_debug,
        "connect_args": _connect_args(url),
    }
    if url.startswith("postgresql"):
        options["pool_size"] = settings.db_pool_size
    options.update(kwargs)
    new_engine = create_engine(url, **options)
    if url.startswith("sqlite"):
        enable_sqlite_foreign_keys(new_engine)
    return new_engine


engine = build_engine(settings.effective_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection.

    The session is closed even when the request fails or is cancelled, which
    hands its connection back to the pool.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Commit the unit of work on success, roll it back on any error."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
