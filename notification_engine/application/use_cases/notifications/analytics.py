"""Aggregated notification metrics computed without loading message bodies."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Final

from notification_engine.domain.errors import InvalidFilterError
from notification_engine.domain.interfaces import NotificationStore
from notification_engine.domain.query import NotificationPredicate
from notification_engine.utils import ensure_utc, now_utc

MIN_WINDOW_DAYS: Final[int] = 1
MAX_WINDOW_DAYS: Final[int] = 365
DAILY_ACTIVITY_DAYS: Final[int] = 7


@dataclass
class NotificationAnalytics:
    """Counters for notifications created inside a trailing window."""

    window_days: int
    total_in_window: int
    unread_in_window: int
    read_in_window: int
    read_rate: float
    by_type: dict[str, int] = field(default_factory=dict)
    daily_activity: dict[str, int] = field(default_factory=dict)


@dataclass
class NotificationStats:
    """All-time counters for a user, split by type."""

    total: int
    unread: int
    read: int
    by_type: dict[str, int] = field(default_factory=dict)


def get_analytics(
    store: NotificationStore,
    *,
    user_id: str,
    window_days: int = 30,
    reference: datetime | None = None,
) -> NotificationAnalytics:
    """Return window metrics from a single grouped aggregate.

    ``daily_activity`` covers the last seven UTC days of the window.
    """

    if isinstance(window_days, bool) or not isinstance(window_days, int):
        raise InvalidFilterError("window_days must be an integer")
    if not MIN_WINDOW_DAYS <= window_days <= MAX_WINDOW_DAYS:
        raise InvalidFilterError(
            f"window_days must be between {MIN_WINDOW_DAYS} and {MAX_WINDOW_DAYS}"
        )

    now = ensure_utc(reference) or now_utc()
    window_start = now - timedelta(days=window_days)
    activity_start = max(window_start, now - timedelta(days=DAILY_ACTIVITY_DAYS)).date()

    groups = store.group_counts(
        user_id, NotificationPredicate(created_from=window_start), by_day=True
    )

    total = unread = 0
    by_type: Counter[str] = Counter()
    daily: Counter[str] = Counter()
    for group in groups:
        total += group.count
        if not group.read:
            unread += group.count
        by_type[group.type] += group.count
        if group.day is not None and group.day >= activity_start:
            daily[group.day.isoformat()] += group.count

    read = total - unread
    read_rate = round(read / total * 100, 2) if total else 0.0
    return NotificationAnalytics(
        window_days=window_days,
        total_in_window=total,
        unread_in_window=unread,
        read_in_window=read,
        read_rate=read_rate,
        by_type=dict(sorted(by_type.items())),
        daily_activity=dict(sorted(daily.items())),
    )


def get_stats(store: NotificationStore, *, user_id: str) -> NotificationStats:
    """Return all-time totals and the per-type distribution."""

    total = unread = 0
    by_type: Counter[str] = Counter()
    for group in store.group_counts(user_id, NotificationPredicate()):
        total += group.count
        if not group.read:
            unread += group.count
        by_type[group.type] += group.count
    return NotificationStats(
        total=total,
        unread=unread,
        read=total - unread,
        by_type=dict(sorted(by_type.items())),
    )


__all__ = [
    "DAILY_ACTIVITY_DAYS",
    "MAX_WINDOW_DAYS",
    "MIN_WINDOW_DAYS",
    "NotificationAnalytics",
    "NotificationStats",
    "get_analytics",
    "get_stats",
]
