"""Pure delivery-eligibility rules derived from user preferences."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from typing import Final

from notification_engine.config import Settings
from notification_engine.domain.entities import (
    Channel,
    EmailFrequency,
    NotificationPreferences,
)
from notification_engine.utils import ensure_utc, resolve_timezone

from .validators import parse_channel, parse_clock

REASON_CHANNEL_DISABLED: Final[str] = "channel_disabled"
REASON_TYPE_NOT_ALLOWED: Final[str] = "type_not_allowed"
REASON_MARKETING_OPT_OUT: Final[str] = "marketing_opt_out"
REASON_PROMOTIONAL_OPT_OUT: Final[str] = "promotional_opt_out"
REASON_QUIET_HOURS: Final[str] = "quiet_hours"


@dataclass(frozen=True)
class DeliveryDecision:
    """Outcome of evaluating one notification for one channel.

    ``eligible=False`` without ``deferred_until`` means the notification must
    never be sent on this channel; with ``deferred_until`` it may be sent
    from that instant on.
    """

    eligible: bool
    digest: bool = False
    deferred_until: datetime | None = None
    reason: str | None = None


@dataclass(frozen=True)
class ContentClassification:
    """Which notification types count as marketing or promotional content."""

    marketing_types: frozenset[str] = frozenset({"marketing"})
    promotional_types: frozenset[str] = frozenset({"promotional", "promotion"})

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContentClassification":
        return cls(
            marketing_types=_normalize(settings.marketing_types),
            promotional_types=_normalize(settings.promotional_types),
        )

    def is_marketing(self, notification_type: str) -> bool:
        return notification_type.lower() in self.marketing_types

    def is_promotional(self, notification_type: str) -> bool:
        return notification_type.lower() in self.promotional_types


def evaluate(
    preferences: NotificationPreferences | None,
    channel: Channel | str,
    notification_type: str,
    now: datetime,
    user_timezone: str | tzinfo | None = None,
    *,
    classification: ContentClassification | None = None,
    user_id: str = "",
) -> DeliveryDecision:
    """Decide whether ``notification_type`` may go out on ``channel`` at ``now``.

    Missing preferences are evaluated as the defaults. The timezone falls
    back to the one stored in the preferences, then to the application one.
    """

    prefs = preferences or NotificationPreferences.defaults(user_id)
    target = parse_channel(channel)
    rules = classification or ContentClassification()

    if not prefs.channel_enabled(target):
        return DeliveryDecision(eligible=False, reason=REASON_CHANNEL_DISABLED)
    if not prefs.allows_type(target, notification_type):
        return DeliveryDecision(eligible=False, reason=REASON_TYPE_NOT_ALLOWED)
    if not prefs.marketing_enabled and rules.is_marketing(notification_type):
        return DeliveryDecision(eligible=False, reason=REASON_MARKETING_OPT_OUT)
    if not prefs.promotional_enabled and rules.is_promotional(notification_type):
        return DeliveryDecision(eligible=False, reason=REASON_PROMOTIONAL_OPT_OUT)

    # In-app notifications are always stored; only active channels wait.
    if target.is_active:
        resume_at = quiet_hours_end(prefs, now, _timezone_for(prefs, user_timezone))
        if resume_at is not None:
            return DeliveryDecision(
                eligible=False, deferred_until=resume_at, reason=REASON_QUIET_HOURS
            )
        frequency = EmailFrequency(prefs.email_frequency)
        if prefs.digest_enabled and frequency is not EmailFrequency.IMMEDIATE:
            return DeliveryDecision(eligible=True, digest=True)

    return DeliveryDecision(eligible=True)


def quiet_hours_end(
    preferences: NotificationPreferences, now: datetime, tz: tzinfo
) -> datetime | None:
    """Return when the current quiet-hours window ends, or ``None`` outside it.

    The window is ``[start, end)`` in local time; ``start > end`` wraps past
    midnight and ``start == end`` is an empty window.
    """

    if not preferences.quiet_hours_enabled:
        return None
    if not preferences.quiet_hours_start or not preferences.quiet_hours_end:
        return None

    start_hour, start_minute = parse_clock(preferences.quiet_hours_start)
    end_hour, end_minute = parse_clock(preferences.quiet_hours_end)
    start = start_hour * 60 + start_minute
    end = end_hour * 60 + end_minute

    local = ensure_utc(now).astimezone(tz)
    current = local.hour * 60 + local.minute
    if start == end:
        return None
    if start < end:
        inside = start <= current < end
    else:
        inside = current >= start or current < end
    if not inside:
        return None

    end_day = local.date() if current < end else local.date() + timedelta(days=1)
    return datetime.combine(end_day, time(end_hour, end_minute), tzinfo=tz)


def _timezone_for(
    preferences: NotificationPreferences, user_timezone: str | tzinfo | None
) -> tzinfo:
    if isinstance(user_timezone, tzinfo):
        return user_timezone
    if user_timezone:
        return resolve_timezone(user_timezone)
    return resolve_timezone(preferences.timezone)


def _normalize(types: Iterable[str]) -> frozenset[str]:
    return frozenset(item.strip().lower() for item in types if item and item.strip())


__all__ = [
    "ContentClassification",
    "DeliveryDecision",
    "REASON_CHANNEL_DISABLED",
    "REASON_MARKETING_OPT_OUT",
    "REASON_PROMOTIONAL_OPT_OUT",
    "REASON_QUIET_HOURS",
    "REASON_TYPE_NOT_ALLOWED",
    "evaluate",
    "quiet_hours_end",
]
