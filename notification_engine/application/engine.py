"""Facade that binds the notification use cases to a pair of stores."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from notification_engine.config import Settings, get_settings
from notification_engine.domain.entities import (
    Channel,
    Notification,
    NotificationPreferences,
    PreferencesUpdate,
)
from notification_engine.domain.interfaces import NotificationStore, PreferenceStore
from notification_engine.domain.query import FilterSpec, NotificationCounts
from notification_engine.infrastructure.repositories import (
    NotificationPreferenceRepository,
    NotificationRepository,
)
from notification_engine.utils import now_utc

from .use_cases import notifications as notification_cases
from .use_cases import preferences as preference_cases
from .use_cases.notifications import (
    BatchResult,
    CsvExport,
    DigestFlushResult,
    DigestTransmitter,
    NotificationAnalytics,
    NotificationStats,
    Page,
)
from .use_cases.preferences import ContentClassification, DeliveryDecision


class NotificationEngine:
    """Stateless entry point over a notification store and a preference store.

    Every method delegates to a use-case function; the engine only supplies
    the stores and the configured defaults (page size, batch sizes and the
    marketing/promotional classification).
    """

    def __init__(
        self,
        notification_store: NotificationStore,
        preference_store: PreferenceStore,
        *,
        settings: Settings | None = None,
    ) -> None:
        self.notification_store = notification_store
        self.preference_store = preference_store
        self.settings = settings or get_settings()
        self.classification = ContentClassification.from_settings(self.settings)

    @classmethod
    def from_session(
        cls, session: Session, *, settings: Settings | None = None
    ) -> "NotificationEngine":
        return cls(
            NotificationRepository(session),
            NotificationPreferenceRepository(session),
            settings=settings,
        )

    # Retrieval

    def get_page(
        self,
        user_id: str,
        filters: FilterSpec | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Page:
        return notification_cases.get_page(
            self.notification_store,
            user_id=user_id,
            filters=filters,
            cursor=cursor,
            limit=limit if limit is not None else self.settings.default_page_size,
        )

    def get_recent(self, user_id: str, limit: int = 10) -> list[Notification]:
        return notification_cases.get_recent(
            self.notification_store, user_id=user_id, limit=limit
        )

    def export(self, user_id: str, filters: FilterSpec | None = None) -> list[Notification]:
        return notification_cases.export_notifications(
            self.notification_store, user_id=user_id, filters=filters
        )

    def export_csv(
        self,
        user_id: str,
        filters: FilterSpec | None = None,
        *,
        reference: datetime | None = None,
    ) -> CsvExport:
        return notification_cases.export_notifications_csv(
            self.notification_store,
            user_id=user_id,
            filters=filters,
            reference=reference,
        )

    def get_counts_optimized(self, user_id: str) -> NotificationCounts:
        return notification_cases.get_counts(self.notification_store, user_id=user_id)

    def get_unread_count(self, user_id: str) -> int:
        return notification_cases.get_unread_count(
            self.notification_store, user_id=user_id
        )

    def get_stats(self, user_id: str) -> NotificationStats:
        return notification_cases.get_stats(self.notification_store, user_id=user_id)

    def get_notifications_batch(
        self, user_id: str, ids: Sequence[str]
    ) -> list[Notification]:
        return notification_cases.get_notifications_batch(
            self.notification_store, user_id=user_id, ids=ids
        )

    def analytics(
        self,
        user_id: str,
        window_days: int = 30,
        *,
        reference: datetime | None = None,
    ) -> NotificationAnalytics:
        return notification_cases.get_analytics(
            self.notification_store,
            user_id=user_id,
            window_days=window_days,
            reference=reference,
        )

    # Mutations

    def create_notification(
        self, user_id: str, type: str, message: str, link: str | None = None
    ) -> Notification:
        return notification_cases.create_notification(
            self.notification_store,
            user_id=user_id,
            type=type,
            message=message,
            link=link,
        )

    def mark_as_read(self, notification_id: str, *, user_id: str | None = None) -> Notification:
        return notification_cases.mark_as_read(
            self.notification_store, notification_id, user_id=user_id
        )

    def mark_as_unread(
        self, notification_id: str, *, user_id: str | None = None
    ) -> Notification:
        return notification_cases.mark_as_unread(
            self.notification_store, notification_id, user_id=user_id
        )

    def delete(self, notification_id: str, *, user_id: str | None = None) -> int:
        return notification_cases.delete_notification(
            self.notification_store, notification_id, user_id=user_id
        )

    def mark_all_as_read(self, user_id: str) -> int:
        return notification_cases.mark_all_as_read(
            self.notification_store, user_id=user_id
        )

    def delete_all_notifications(self, user_id: str) -> int:
        return notification_cases.delete_all_notifications(
            self.notification_store, user_id=user_id
        )

    def delete_read_notifications(self, user_id: str) -> int:
        return notification_cases.delete_read_notifications(
            self.notification_store, user_id=user_id
        )

    def delete_notifications_by_type(self, user_id: str, type: str) -> int:
        return notification_cases.delete_notifications_by_type(
            self.notification_store, user_id=user_id, type=type
        )

    def bulk_mark_as_read(
        self, ids: Iterable[str], *, user_id: str | None = None
    ) -> BatchResult:
        return notification_cases.bulk_mark_as_read(
            self.notification_store, ids, user_id=user_id
        )

    def bulk_mark_as_unread(
        self, ids: Iterable[str], *, user_id: str | None = None
    ) -> BatchResult:
        return notification_cases.bulk_mark_as_unread(
            self.notification_store, ids, user_id=user_id
        )

    def bulk_delete(self, ids: Iterable[str], *, user_id: str | None = None) -> BatchResult:
        return notification_cases.bulk_delete(
            self.notification_store, ids, user_id=user_id
        )

    def bulk_mark_as_read_optimized(
        self,
        ids: Iterable[str],
        batch_size: int | None = None,
        *,
        user_id: str | None = None,
    ) -> BatchResult:
        return notification_cases.bulk_mark_as_read_optimized(
            self.notification_store,
            ids,
            batch_size=(
                batch_size if batch_size is not None else self.settings.default_batch_size
            ),
            user_id=user_id,
        )

    def flush_digest(
        self,
        user_id: str,
        transmit: DigestTransmitter,
        *,
        reference: datetime | None = None,
    ) -> DigestFlushResult:
        return notification_cases.flush_digest(
            self.notification_store,
            user_id=user_id,
            transmit=transmit,
            batch_size=self.settings.digest_batch_size,
            reference=reference,
        )

    # Preferences

    def evaluate(
        self,
        preferences: NotificationPreferences | None,
        channel: Channel | str,
        notification_type: str,
        now: datetime | None = None,
        user_timezone: str | None = None,
    ) -> DeliveryDecision:
        return preference_cases.evaluate(
            preferences,
            channel,
            notification_type,
            now or now_utc(),
            user_timezone,
            classification=self.classification,
            user_id=preferences.user_id if preferences else "",
        )

    def get_preferences(self, user_id: str) -> NotificationPreferences:
        return preference_cases.get_preferences(self.preference_store, user_id=user_id)

    def update_preferences(
        self, user_id: str, update: PreferencesUpdate
    ) -> NotificationPreferences:
        return preference_cases.update_preferences(
            self.preference_store, user_id=user_id, update=update
        )

    def delete_preferences(self, user_id: str) -> bool:
        return preference_cases.delete_preferences(
            self.preference_store, user_id=user_id
        )

    def evaluate_for_user(
        self,
        user_id: str,
        notification_type: str,
        channel: Channel | str,
        now: datetime | None = None,
    ) -> DeliveryDecision:
        """Load the preferences of ``user_id`` and evaluate one delivery."""

        return preference_cases.evaluate_for_user(
            self.preference_store,
            user_id=user_id,
            notification_type=notification_type,
            channel=channel,
            now=now,
            settings=self.settings,
        )

    def should_send(
        self,
        user_id: str,
        notification_type: str,
        channel: Channel | str,
        now: datetime | None = None,
    ) -> bool:
        return preference_cases.should_send(
            self.preference_store,
            user_id=user_id,
            notification_type=notification_type,
            channel=channel,
            now=now,
            settings=self.settings,
        )

    def is_in_quiet_hours(self, user_id: str, now: datetime | None = None) -> bool:
        return preference_cases.is_in_quiet_hours(
            self.preference_store, user_id=user_id, now=now
        )


__all__ = ["NotificationEngine"]
