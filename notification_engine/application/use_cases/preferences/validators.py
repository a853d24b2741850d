"""Validation helpers for preference updates."""

from __future__ import annotations

import re
from typing import Final

from notification_engine.domain.entities import (
    Channel,
    EmailFrequency,
    PreferencesUpdate,
)
from notification_engine.domain.errors import InvalidPreferencesError
from notification_engine.utils.datetime import is_known_timezone

_CLOCK_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<hour>\d{2}):(?P<minute>\d{2})$")
_TYPE_LIST_FIELDS: Final[tuple[str, ...]] = ("email_types", "push_types", "in_app_types")


def parse_clock(value: str) -> tuple[int, int]:
    """Return ``(hour, minute)`` for an ``HH:MM`` string."""

    match = _CLOCK_PATTERN.match(value or "")
    if not match:
        raise InvalidPreferencesError(f"'{value}' is not a valid HH:MM time")
    hour = int(match.group("hour"))
    minute = int(match.group("minute"))
    if hour > 23 or minute > 59:
        raise InvalidPreferencesError(f"'{value}' is not a valid HH:MM time")
    return hour, minute


def parse_channel(value: Channel | str) -> Channel:
    try:
        return Channel(value)
    except ValueError as exc:
        raise InvalidPreferencesError(f"Unknown delivery channel '{value}'") from exc


def validate_update(update: PreferencesUpdate) -> PreferencesUpdate:
    """Check the supplied fields and return a normalized copy of ``update``."""

    provided = update.provided()
    normalized: dict[str, object] = {}

    for name, value in provided.items():
        if name in _TYPE_LIST_FIELDS:
            if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
                raise InvalidPreferencesError(f"{name} must be a list of types")
            cleaned: list[str] = []
            for item in value:
                if not isinstance(item, str) or not item.strip():
                    raise InvalidPreferencesError(f"{name} contains an invalid type")
                if item.strip() not in cleaned:
                    cleaned.append(item.strip())
            normalized[name] = cleaned
        elif name == "email_frequency":
            try:
                normalized[name] = EmailFrequency(value)
            except ValueError as exc:
                raise InvalidPreferencesError(
                    f"email_frequency must be one of "
                    f"{', '.join(item.value for item in EmailFrequency)}"
                ) from exc
        elif name in ("quiet_hours_start", "quiet_hours_end"):
            if value is not None:
                hour, minute = parse_clock(str(value))
                value = f"{hour:02d}:{minute:02d}"
            normalized[name] = value
        elif name == "timezone":
            if value is not None and not is_known_timezone(str(value)):
                raise InvalidPreferencesError(f"Unknown timezone '{value}'")
            normalized[name] = value
        else:
            if not isinstance(value, bool):
                raise InvalidPreferencesError(f"{name} must be a boolean")
            normalized[name] = value

    return PreferencesUpdate(**normalized)


def ensure_quiet_hours_window(
    enabled: bool, start: str | None, end: str | None
) -> None:
    """Quiet hours cannot be enabled without both ends of the window."""

    if enabled and (start is None or end is None):
        raise InvalidPreferencesError(
            "quiet_hours_start and quiet_hours_end are required when quiet hours are enabled"
        )


__all__ = [
    "ensure_quiet_hours_window",
    "parse_channel",
    "parse_clock",
    "validate_update",
]
