"""Store-agnostic descriptions of notification queries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


class SortBy(str, Enum):
    """Orderings supported by retrieval paths."""

    NEWEST = "newest"
    OLDEST = "oldest"
    TYPE = "type"


class ReadStatus(str, Enum):
    """Read-state dimension of a filter."""

    ALL = "all"
    READ = "read"
    UNREAD = "unread"


@dataclass(frozen=True)
class FilterSpec:
    """Declarative filter request shared by paginated and export retrieval."""

    search: str | None = None
    types: frozenset[str] | None = None
    status: ReadStatus = ReadStatus.ALL
    date_from: datetime | None = None
    date_to: datetime | None = None
    sort_by: SortBy = SortBy.NEWEST


@dataclass(frozen=True)
class NotificationPredicate:
    """Conjunction of row conditions. ``None`` means "do not constrain"."""

    search: str | None = None
    types: frozenset[str] | None = None
    read: bool | None = None
    created_from: datetime | None = None
    created_before: datetime | None = None
    ids: tuple[str, ...] | None = None
    pending_digest: bool | None = None


@dataclass(frozen=True)
class OrderKey:
    """One component of a composite sort key."""

    field: str
    descending: bool


@dataclass(frozen=True)
class QueryDescriptor:
    """Predicate plus total ordering; fully determines a result sequence."""

    sort_by: SortBy
    predicate: NotificationPredicate
    order: tuple[OrderKey, ...]


@dataclass(frozen=True)
class CursorPosition:
    """Sort key values and id of the last row of the previous page.

    ``values`` lines up with every order key except the trailing ``id``.
    """

    sort_by: SortBy
    values: tuple[Any, ...]
    id: str


@dataclass(frozen=True)
class NotificationCounts:
    """Total/unread/read counters computed in a single aggregate."""

    total: int
    unread: int
    read: int


@dataclass(frozen=True)
class GroupedCount:
    """Row count for one ``(type, read, day)`` group."""

    type: str
    read: bool
    day: date | None
    count: int


__all__ = [
    "CursorPosition",
    "FilterSpec",
    "GroupedCount",
    "NotificationCounts",
    "NotificationPredicate",
    "OrderKey",
    "QueryDescriptor",
    "ReadStatus",
    "SortBy",
]
