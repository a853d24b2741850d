"""Single-item and predicate-scoped notification mutations."""

from __future__ import annotations

import logging
from dataclasses import replace

from notification_engine.domain.entities import Notification
from notification_engine.domain.errors import NotificationNotFoundError
from notification_engine.domain.interfaces import NotificationStore
from notification_engine.domain.query import NotificationPredicate
from notification_engine.utils import ensure_utc, now_utc

logger = logging.getLogger(__name__)

_MAX_TYPE_LENGTH = 50


def create_notification(
    store: NotificationStore,
    *,
    user_id: str,
    type: str,
    message: str,
    link: str | None = None,
) -> Notification:
    """Persist a new unread notification for ``user_id``."""

    if not user_id or not user_id.strip():
        raise ValueError("user_id is required")
    normalized_type = (type or "").strip()
    if not normalized_type:
        raise ValueError("type is required")
    if len(normalized_type) > _MAX_TYPE_LENGTH:
        raise ValueError(f"type must be at most {_MAX_TYPE_LENGTH} characters")
    if not message or not message.strip():
        raise ValueError("message is required")

    now = now_utc()
    notification = Notification(
        id=None,
        user_id=user_id,
        type=normalized_type,
        message=message,
        link=link or None,
        read=False,
        created_at=now,
        updated_at=now,
    )
    return store.create(notification)


def mark_as_read(
    store: NotificationStore, notification_id: str, *, user_id: str | None = None
) -> Notification:
    """Mark one notification as read; already-read items are left untouched."""

    return _set_read_state(store, notification_id, read=True, user_id=user_id)


def mark_as_unread(
    store: NotificationStore, notification_id: str, *, user_id: str | None = None
) -> Notification:
    """Mark one notification as unread; already-unread items are left untouched."""

    return _set_read_state(store, notification_id, read=False, user_id=user_id)


def delete_notification(
    store: NotificationStore, notification_id: str, *, user_id: str | None = None
) -> int:
    """Delete one notification. Missing ids are not an error; returns rows removed."""

    if user_id is None:
        return store.delete_by_id(notification_id)
    return store.delete_by_predicate(
        user_id, NotificationPredicate(ids=(notification_id,))
    )


def mark_all_as_read(store: NotificationStore, *, user_id: str) -> int:
    now = now_utc()
    affected = store.update_by_predicate(
        user_id, NotificationPredicate(read=False), {"read": True, "updated_at": now}
    )
    logger.info("Marked %s notifications as read for user %s", affected, user_id)
    return affected


def delete_all_notifications(store: NotificationStore, *, user_id: str) -> int:
    affected = store.delete_by_predicate(user_id, NotificationPredicate())
    logger.info("Deleted %s notifications for user %s", affected, user_id)
    return affected


def delete_read_notifications(store: NotificationStore, *, user_id: str) -> int:
    affected = store.delete_by_predicate(user_id, NotificationPredicate(read=True))
    logger.info("Deleted %s read notifications for user %s", affected, user_id)
    return affected


def delete_notifications_by_type(
    store: NotificationStore, *, user_id: str, type: str
) -> int:
    affected = store.delete_by_predicate(
        user_id, NotificationPredicate(types=frozenset({type}))
    )
    logger.info(
        "Deleted %s notifications of type %s for user %s", affected, type, user_id
    )
    return affected


def _set_read_state(
    store: NotificationStore,
    notification_id: str,
    *,
    read: bool,
    user_id: str | None,
) -> Notification:
    current = store.get_by_id(notification_id)
    if current is None or (user_id is not None and current.user_id != user_id):
        raise NotificationNotFoundError(notification_id)
    if current.read is read:
        return current

    # updated_at never precedes created_at, even with clock skew.
    now = now_utc()
    created_at = ensure_utc(current.created_at)
    if created_at is not None and now < created_at:
        now = created_at
    affected = store.update_by_id(notification_id, {"read": read, "updated_at": now})
    if affected == 0:
        raise NotificationNotFoundError(notification_id)
    return replace(current, read=read, updated_at=now)


__all__ = [
    "create_notification",
    "delete_all_notifications",
    "delete_notification",
    "delete_notifications_by_type",
    "delete_read_notifications",
    "mark_all_as_read",
    "mark_as_read",
    "mark_as_unread",
]
