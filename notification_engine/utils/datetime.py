"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from notification_engine.config import get_settings

_UTC_NAMES: Final[frozenset[str]] = frozenset({"utc", "gmt", "z", "etc/utc"})
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)?(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    The timezone is resolved using the ``APP_TIMEZONE`` environment variable. If
    the provided value cannot be resolved, UTC is used.
    """

    settings = get_settings()
    return resolve_timezone(settings.app_timezone, fallback=timezone.utc)


def resolve_timezone(tz_name: str | None, *, fallback: tzinfo | None = None) -> tzinfo:
    """Resolve ``tz_name`` into a ``tzinfo`` instance.

    Accepts IANA names (``Europe/Madrid``) and fixed offsets such as
    ``UTC-05:00`` or ``+0130``. Unknown or empty names resolve to ``fallback``,
    which defaults to the application timezone.
    """

    name = (tz_name or "").strip()
    if not name:
        return fallback if fallback is not None else get_app_timezone()
    if name.lower() in _UTC_NAMES:
        return timezone.utc

    match = _OFFSET_PATTERN.match(name)
    if match:
        sign = -1 if match.group("sign") == "-" else 1
        hours = int(match.group("hours"))
        minutes = int(match.group("minutes") or 0)
        if hours < 24 and minutes < 60:
            return timezone(sign * timedelta(hours=hours, minutes=minutes))

    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return fallback if fallback is not None else get_app_timezone()


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` to an aware UTC datetime.

    Naive values are interpreted as UTC, which is how they are stored.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` expressed in UTC but without ``tzinfo``.

    Database columns store naive UTC values; the domain layer always works
    with aware datetimes.
    """

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.replace(tzinfo=None)


def now_naive_utc() -> datetime:
    """Return the current UTC time without attaching ``tzinfo``."""

    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def is_known_timezone(tz_name: str) -> bool:
    """Return ``True`` when ``tz_name`` resolves without falling back."""

    sentinel = timezone(timedelta(hours=23, minutes=59), "unresolved")
    return resolve_timezone(tz_name, fallback=sentinel) is not sentinel
