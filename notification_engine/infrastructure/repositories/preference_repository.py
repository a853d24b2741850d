"""Persistence helpers for notification preferences."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notification_engine.domain.entities import (
    EmailFrequency,
    NotificationPreferences,
    PreferencesUpdate,
)
from notification_engine.domain.errors import StoreFaultError
from notification_engine.infrastructure.models import NotificationPreferenceModel
from notification_engine.utils import ensure_utc, now_utc, to_naive_utc

logger = logging.getLogger(__name__)


class NotificationPreferenceRepository:
    """SQLAlchemy implementation of the preference store."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> NotificationPreferences | None:
        with self._guard("get"):
            model = self.session.get(NotificationPreferenceModel, user_id)
        return self._to_entity(model) if model else None

    def upsert(self, user_id: str, update: PreferencesUpdate) -> NotificationPreferences:
        """Merge ``update`` into the stored record, creating it with defaults."""

        with self._guard("upsert"):
            model = self.session.get(NotificationPreferenceModel, user_id)
            now = now_utc()
            if model is None:
                current = NotificationPreferences.defaults(user_id)
                current.created_at = now
                model = NotificationPreferenceModel(user_id=user_id)
                self.session.add(model)
                logger.info("Creating notification preferences for user %s", user_id)
            else:
                current = self._to_entity(model)
            merged = update.apply_to(current)
            merged.updated_at = now
            self._apply_entity_to_model(model, merged)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, user_id: str) -> int:
        with self._guard("delete"):
            affected = (
                self.session.query(NotificationPreferenceModel)
                .filter(NotificationPreferenceModel.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        return int(affected or 0)

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Preference store operation '%s' failed", operation)
            raise StoreFaultError(operation, exc.__class__.__name__) from exc

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationPreferenceModel, preferences: NotificationPreferences
    ) -> None:
        model.email_enabled = preferences.email_enabled
        model.push_enabled = preferences.push_enabled
        model.in_app_enabled = preferences.in_app_enabled
        model.email_types = list(preferences.email_types)
        model.push_types = list(preferences.push_types)
        model.in_app_types = list(preferences.in_app_types)
        model.email_frequency = EmailFrequency(preferences.email_frequency).value
        model.digest_enabled = preferences.digest_enabled
        model.quiet_hours_enabled = preferences.quiet_hours_enabled
        model.quiet_hours_start = preferences.quiet_hours_start
        model.quiet_hours_end = preferences.quiet_hours_end
        model.marketing_enabled = preferences.marketing_enabled
        model.promotional_enabled = preferences.promotional_enabled
        model.timezone = preferences.timezone
        if preferences.created_at is not None:
            model.created_at = to_naive_utc(preferences.created_at)
        model.updated_at = to_naive_utc(preferences.updated_at)

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> NotificationPreferences:
        return NotificationPreferences(
            user_id=model.user_id,
            email_enabled=bool(model.email_enabled),
            push_enabled=bool(model.push_enabled),
            in_app_enabled=bool(model.in_app_enabled),
            email_types=list(model.email_types or []),
            push_types=list(model.push_types or []),
            in_app_types=list(model.in_app_types or []),
            email_frequency=EmailFrequency(model.email_frequency),
            digest_enabled=bool(model.digest_enabled),
            quiet_hours_enabled=bool(model.quiet_hours_enabled),
            quiet_hours_start=model.quiet_hours_start,
            quiet_hours_end=model.quiet_hours_end,
            marketing_enabled=bool(model.marketing_enabled),
            promotional_enabled=bool(model.promotional_enabled),
            timezone=model.timezone,
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


__all__ = ["NotificationPreferenceRepository"]
