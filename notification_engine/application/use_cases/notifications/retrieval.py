"""Read paths: cursor pagination, recent items, exports and counters."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from io import StringIO
from typing import Final

import pandas as pd

from notification_engine.domain.entities import Notification
from notification_engine.domain.errors import InvalidCursorError, InvalidFilterError
from notification_engine.domain.interfaces import NotificationStore
from notification_engine.domain.query import (
    FilterSpec,
    NotificationCounts,
    NotificationPredicate,
    SortBy,
)
from notification_engine.utils import now_utc

from .batching import unique_ids
from .cursor import decode_cursor, encode_cursor
from .filters import compile_filter

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE: Final[int] = 100
MAX_RECENT_SIZE: Final[int] = 50
CSV_HEADER: Final[tuple[str, ...]] = (
    "ID",
    "Message",
    "Type",
    "Status",
    "Created At",
    "Updated At",
    "Link",
)


@dataclass
class Page:
    """One page of notifications and the cursor to request the next one."""

    items: list[Notification]
    next_cursor: str | None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


@dataclass
class CsvExport:
    content: str
    filename: str
    count: int


def _validate_limit(limit: int, maximum: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidFilterError("limit must be an integer")
    if not 1 <= limit <= maximum:
        raise InvalidFilterError(f"limit must be between 1 and {maximum}")
    return limit


def get_page(
    store: NotificationStore,
    *,
    user_id: str,
    filters: FilterSpec | None = None,
    cursor: str | None = None,
    limit: int = 20,
) -> Page:
    """Return up to ``limit`` notifications after ``cursor``.

    One extra row is fetched to learn whether another page exists, so no
    separate count query is needed.
    """

    size = _validate_limit(limit, MAX_PAGE_SIZE)
    query = compile_filter(filters or FilterSpec())
    position = None
    if cursor:
        try:
            position = decode_cursor(query.sort_by, cursor)
        except InvalidCursorError:
            logger.warning("Rejected pagination cursor for user %s", user_id)
            raise

    rows = list(store.find(user_id, query, cursor=position, limit=size + 1))
    if len(rows) <= size:
        return Page(items=rows, next_cursor=None)

    items = rows[:size]
    return Page(items=items, next_cursor=encode_cursor(query.sort_by, items[-1]))


def get_recent(
    store: NotificationStore, *, user_id: str, limit: int = 10
) -> list[Notification]:
    """Return the newest notifications of ``user_id`` without any filter."""

    size = _validate_limit(limit, MAX_RECENT_SIZE)
    page = get_page(
        store,
        user_id=user_id,
        filters=FilterSpec(sort_by=SortBy.NEWEST),
        limit=size,
    )
    return page.items


def export_notifications(
    store: NotificationStore,
    *,
    user_id: str,
    filters: FilterSpec | None = None,
) -> list[Notification]:
    """Return every notification matching ``filters`` in page order."""

    query = compile_filter(filters or FilterSpec())
    return list(store.find(user_id, query))


def export_notifications_csv(
    store: NotificationStore,
    *,
    user_id: str,
    filters: FilterSpec | None = None,
    reference: datetime | None = None,
) -> CsvExport:
    """Render :func:`export_notifications` as a CSV document."""

    notifications = export_notifications(store, user_id=user_id, filters=filters)
    rows = [
        (
            notification.id,
            notification.message,
            notification.type,
            "Read" if notification.read else "Unread",
            _iso_or_empty(notification.created_at),
            _iso_or_empty(notification.updated_at),
            notification.link or "",
        )
        for notification in notifications
    ]
    dataframe = pd.DataFrame(rows, columns=list(CSV_HEADER))
    buffer = StringIO()
    dataframe.to_csv(buffer, index=False, lineterminator="\n")
    day = (reference or now_utc()).date().isoformat()
    return CsvExport(
        content=buffer.getvalue(),
        filename=f"notifications-{user_id}-{day}.csv",
        count=len(notifications),
    )


def get_counts(store: NotificationStore, *, user_id: str) -> NotificationCounts:
    """Return total/unread/read counters from one aggregate statement."""

    return store.count_aggregate(user_id, NotificationPredicate())


def get_unread_count(store: NotificationStore, *, user_id: str) -> int:
    return get_counts(store, user_id=user_id).unread


def get_notifications_batch(
    store: NotificationStore, *, user_id: str, ids: Sequence[str]
) -> list[Notification]:
    """Return the notifications of ``user_id`` among ``ids``, newest first."""

    return list(store.get_many(user_id, unique_ids(ids)))


def _iso_or_empty(value: datetime | None) -> str:
    return value.isoformat() if value else ""


__all__ = [
    "CsvExport",
    "MAX_PAGE_SIZE",
    "MAX_RECENT_SIZE",
    "Page",
    "export_notifications",
    "export_notifications_csv",
    "get_counts",
    "get_notifications_batch",
    "get_page",
    "get_recent",
    "get_unread_count",
]
