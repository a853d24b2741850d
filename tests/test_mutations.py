"""Tests for single-item and predicate-scoped mutations."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from notification_engine.application.use_cases.notifications import (
    create_notification,
    delete_all_notifications,
    delete_notification,
    delete_notifications_by_type,
    delete_read_notifications,
    mark_all_as_read,
    mark_as_read,
    mark_as_unread,
)
from notification_engine.domain.errors import NotificationNotFoundError, StoreFaultError
from notification_engine.infrastructure.repositories import NotificationRepository
from notification_engine.utils import now_utc


def test_create_notification_starts_unread(store):
    created = create_notification(
        store, user_id="u1", type=" alert ", message="Backup finished", link=""
    )

    stored = store.get_by_id(created.id)
    assert stored.read is False
    assert stored.type == "alert"
    assert stored.link is None
    assert stored.updated_at >= stored.created_at


@pytest.mark.parametrize(
    "kwargs",
    [
        {"user_id": "", "type": "alert", "message": "x"},
        {"user_id": "u1", "type": " ", "message": "x"},
        {"user_id": "u1", "type": "t" * 51, "message": "x"},
        {"user_id": "u1", "type": "alert", "message": ""},
    ],
)
def test_create_notification_validates_input(store, kwargs):
    with pytest.raises(ValueError):
        create_notification(store, **kwargs)


def test_mark_as_read_bumps_updated_at_once(store, make_notification):
    notification = make_notification()

    updated = mark_as_read(store, notification.id)
    again = mark_as_read(store, notification.id)

    assert updated.read is True
    assert updated.updated_at > notification.updated_at
    assert again.updated_at == store.get_by_id(notification.id).updated_at
    assert again.updated_at == updated.updated_at


def test_mark_as_unread_reverts_state(store, make_notification):
    notification = make_notification(read=True)

    result = mark_as_unread(store, notification.id)

    assert result.read is False
    assert store.get_by_id(notification.id).read is False


def test_updated_at_never_precedes_created_at(store, make_notification):
    future = now_utc() + timedelta(hours=2)
    notification = make_notification(created_at=future)

    updated = mark_as_read(store, notification.id)

    assert updated.updated_at >= updated.created_at


def test_mark_missing_or_foreign_notification_raises(store, make_notification):
    foreign = make_notification(user_id="u2")

    with pytest.raises(NotificationNotFoundError):
        mark_as_read(store, "does-not-exist")
    with pytest.raises(NotificationNotFoundError):
        mark_as_unread(store, foreign.id, user_id="u1")


def test_delete_is_idempotent(store, make_notification):
    notification = make_notification()

    assert delete_notification(store, notification.id) == 1
    assert delete_notification(store, notification.id) == 0
    assert store.get_by_id(notification.id) is None


def test_delete_scoped_to_user_leaves_foreign_rows(store, make_notification):
    foreign = make_notification(user_id="u2")

    assert delete_notification(store, foreign.id, user_id="u1") == 0
    assert store.get_by_id(foreign.id) is not None


def test_predicate_mutations_return_affected_rows(store, make_notification):
    make_notification(type="alert")
    make_notification(type="alert", read=True)
    make_notification(type="info")
    make_notification(type="info", read=True)
    make_notification(user_id="u2", type="alert")

    assert mark_all_as_read(store, user_id="u1") == 2
    assert delete_notifications_by_type(store, user_id="u1", type="alert") == 2
    assert delete_read_notifications(store, user_id="u1") == 2
    assert delete_all_notifications(store, user_id="u1") == 0
    assert delete_all_notifications(store, user_id="u2") == 1


class _FailingSession:
    """Session stand-in whose queries fail like a broken connection."""

    def __init__(self, session):
        self._session = session

    def get(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    def __getattr__(self, name):
        return getattr(self._session, name)


def test_store_faults_are_wrapped(session, make_notification):
    notification = make_notification()
    broken = NotificationRepository(_FailingSession(session))

    with pytest.raises(StoreFaultError) as excinfo:
        mark_as_read(broken, notification.id)

    assert excinfo.value.operation == "get_by_id"
    assert excinfo.value.__cause__ is not None
