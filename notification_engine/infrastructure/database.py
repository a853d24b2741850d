"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Generator

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from notification_engine.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    SQLite URLs get thread-sharing enabled, and in-memory SQLite URLs share a
    single connection so every session sees the same database.
    """

    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    connect_args = {"check_same_thread": False}
    if url.database in (None, "", ":memory:"):
        logger.debug("Using shared in-memory SQLite database")
        return create_engine(
            database_url, connect_args=connect_args, poolclass=StaticPool
        )
    return create_engine(database_url, connect_args=connect_args)


settings = get_settings()
engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database(bind: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from notification_engine.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
