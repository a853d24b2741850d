"""Use cases that evaluate stored preferences for a user."""

from __future__ import annotations

from datetime import datetime

from notification_engine.config import Settings, get_settings
from notification_engine.domain.entities import Channel
from notification_engine.domain.interfaces import PreferenceStore
from notification_engine.utils import now_utc, resolve_timezone

from .evaluator import ContentClassification, DeliveryDecision, evaluate, quiet_hours_end
from .get_preferences import get_preferences


def evaluate_for_user(
    store: PreferenceStore,
    *,
    user_id: str,
    notification_type: str,
    channel: Channel | str,
    now: datetime | None = None,
    user_timezone: str | None = None,
    settings: Settings | None = None,
) -> DeliveryDecision:
    """Load the preferences of ``user_id`` and evaluate them."""

    preferences = get_preferences(store, user_id=user_id)
    return evaluate(
        preferences,
        channel,
        notification_type,
        now or now_utc(),
        user_timezone,
        classification=ContentClassification.from_settings(settings or get_settings()),
        user_id=user_id,
    )


def should_send(
    store: PreferenceStore,
    *,
    user_id: str,
    notification_type: str,
    channel: Channel | str,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> bool:
    """Return ``True`` when the notification may be delivered right now."""

    decision = evaluate_for_user(
        store,
        user_id=user_id,
        notification_type=notification_type,
        channel=channel,
        now=now,
        settings=settings,
    )
    return decision.eligible


def is_in_quiet_hours(
    store: PreferenceStore, *, user_id: str, now: datetime | None = None
) -> bool:
    preferences = get_preferences(store, user_id=user_id)
    tz = resolve_timezone(preferences.timezone)
    return quiet_hours_end(preferences, now or now_utc(), tz) is not None


__all__ = ["evaluate_for_user", "is_in_quiet_hours", "should_send"]
