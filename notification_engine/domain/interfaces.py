"""Contracts the engine expects from its persistence collaborators."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from notification_engine.domain.entities import (
    Notification,
    NotificationPreferences,
    PreferencesUpdate,
)
from notification_engine.domain.query import (
    CursorPosition,
    GroupedCount,
    NotificationCounts,
    NotificationPredicate,
    QueryDescriptor,
)


class NotificationStore(Protocol):
    """Persistence operations over notifications.

    Every method raises :class:`~notification_engine.domain.errors.StoreFaultError`
    when the backing store fails. Write methods run as one atomic statement
    and return the number of affected rows.
    """

    def find(
        self,
        user_id: str,
        query: QueryDescriptor,
        *,
        cursor: CursorPosition | None = None,
        limit: int | None = None,
    ) -> Sequence[Notification]: ...

    def count_aggregate(
        self, user_id: str, predicate: NotificationPredicate
    ) -> NotificationCounts: ...

    def group_counts(
        self, user_id: str, predicate: NotificationPredicate, *, by_day: bool = False
    ) -> Sequence[GroupedCount]: ...

    def get_by_id(self, notification_id: str) -> Notification | None: ...

    def get_many(self, user_id: str, ids: Sequence[str]) -> Sequence[Notification]: ...

    def create(self, notification: Notification) -> Notification: ...

    def update_by_id(self, notification_id: str, patch: dict[str, Any]) -> int: ...

    def update_by_predicate(
        self,
        user_id: str | None,
        predicate: NotificationPredicate,
        patch: dict[str, Any],
    ) -> int: ...

    def delete_by_id(self, notification_id: str) -> int: ...

    def delete_by_predicate(
        self, user_id: str | None, predicate: NotificationPredicate
    ) -> int: ...


class PreferenceStore(Protocol):
    """Persistence operations over the single preference record of a user."""

    def get(self, user_id: str) -> NotificationPreferences | None: ...

    def upsert(self, user_id: str, update: PreferencesUpdate) -> NotificationPreferences: ...

    def delete(self, user_id: str) -> int: ...


__all__ = ["NotificationStore", "PreferenceStore"]
