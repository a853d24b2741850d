"""Shared fixtures backed by an in-memory SQLite database."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy.orm import sessionmaker

from notification_engine.application.engine import NotificationEngine
from notification_engine.domain.entities import Notification
from notification_engine.infrastructure.database import (
    Base,
    build_engine,
    initialize_database,
)
from notification_engine.infrastructure.repositories import (
    NotificationPreferenceRepository,
    NotificationRepository,
)

BASE_TIME = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db_engine():
    engine = build_engine("sqlite://")
    initialize_database(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session(db_engine):
    factory = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    db = factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def store(session) -> NotificationRepository:
    return NotificationRepository(session)


@pytest.fixture()
def preference_store(session) -> NotificationPreferenceRepository:
    return NotificationPreferenceRepository(session)


@pytest.fixture()
def service(store, preference_store) -> NotificationEngine:
    return NotificationEngine(store, preference_store)


@pytest.fixture()
def make_notification(store):
    """Persist notifications with explicit, strictly increasing timestamps."""

    counter = {"value": 0}

    def factory(
        *,
        user_id: str = "u1",
        type: str = "info",
        message: str = "Hello",
        read: bool = False,
        created_at: datetime | None = None,
        link: str | None = None,
    ) -> Notification:
        counter["value"] += 1
        timestamp = created_at or BASE_TIME + timedelta(minutes=counter["value"])
        return store.create(
            Notification(
                id=None,
                user_id=user_id,
                type=type,
                message=message,
                link=link,
                read=read,
                created_at=timestamp,
                updated_at=timestamp,
            )
        )

    return factory
