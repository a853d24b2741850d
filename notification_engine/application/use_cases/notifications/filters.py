"""Translate declarative filter requests into store query descriptors."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Final

from notification_engine.domain.errors import InvalidFilterError
from notification_engine.domain.query import (
    FilterSpec,
    NotificationPredicate,
    OrderKey,
    QueryDescriptor,
    ReadStatus,
    SortBy,
)
from notification_engine.utils import ensure_utc

ORDERINGS: Final[dict[SortBy, tuple[OrderKey, ...]]] = {
    SortBy.NEWEST: (OrderKey("created_at", True), OrderKey("id", True)),
    SortBy.OLDEST: (OrderKey("created_at", False), OrderKey("id", False)),
    SortBy.TYPE: (
        OrderKey("type", False),
        OrderKey("created_at", True),
        OrderKey("id", True),
    ),
}

_READ_FLAGS: Final[dict[ReadStatus, bool | None]] = {
    ReadStatus.ALL: None,
    ReadStatus.READ: True,
    ReadStatus.UNREAD: False,
}


def build_filter_spec(
    *,
    search: str | None = None,
    types: Iterable[str] | None = None,
    status: ReadStatus | str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    sort_by: SortBy | str | None = None,
) -> FilterSpec:
    """Return a :class:`FilterSpec` from loosely typed request values."""

    try:
        read_status = ReadStatus(status) if status else ReadStatus.ALL
        ordering = SortBy(sort_by) if sort_by else SortBy.NEWEST
    except ValueError as exc:
        raise InvalidFilterError(str(exc)) from exc

    normalized_types = None
    if types is not None:
        normalized_types = frozenset(t.strip() for t in types if t and t.strip())
        if not normalized_types:
            normalized_types = None

    return FilterSpec(
        search=search,
        types=normalized_types,
        status=read_status,
        date_from=date_from,
        date_to=date_to,
        sort_by=ordering,
    )


def compile_filter(spec: FilterSpec) -> QueryDescriptor:
    """Compile ``spec`` into a predicate and a total ordering.

    Dates form the half-open interval ``[date_from, date_to)``.
    """

    date_from = ensure_utc(spec.date_from)
    date_to = ensure_utc(spec.date_to)
    if date_from is not None and date_to is not None and date_to < date_from:
        raise InvalidFilterError("date_to must not be earlier than date_from")

    search = spec.search.strip() if spec.search else None
    predicate = NotificationPredicate(
        search=search or None,
        types=frozenset(spec.types) if spec.types else None,
        read=_READ_FLAGS[ReadStatus(spec.status)],
        created_from=date_from,
        created_before=date_to,
    )
    sort_by = SortBy(spec.sort_by)
    return QueryDescriptor(sort_by=sort_by, predicate=predicate, order=ORDERINGS[sort_by])


__all__ = ["ORDERINGS", "build_filter_spec", "compile_filter"]
