"""Domain entities describing per-user delivery preferences."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Final

from notification_engine.domain.errors import InvalidPreferencesError


class Channel(str, Enum):
    """Delivery channels a notification can use."""

    EMAIL = "email"
    PUSH = "push"
    IN_APP = "in_app"

    @classmethod
    def _missing_(cls, value: object) -> "Channel | None":
        if isinstance(value, str):
            normalized = value.replace("-", "_").lower()
            if normalized == "inapp":
                return cls.IN_APP
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def is_active(self) -> bool:
        """Return ``True`` for channels that push content to the user."""

        return self is not Channel.IN_APP


class EmailFrequency(str, Enum):
    """How often email deliveries are sent."""

    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


ALL_TYPES: Final[str] = "all"


@dataclass
class NotificationPreferences:
    """Delivery preferences stored for a single user.

    An empty allow-list, or one containing ``"all"``, lets every type through
    an enabled channel.
    """

    user_id: str
    email_enabled: bool = True
    push_enabled: bool = True
    in_app_enabled: bool = True
    email_types: list[str] = field(default_factory=list)
    push_types: list[str] = field(default_factory=list)
    in_app_types: list[str] = field(default_factory=list)
    email_frequency: EmailFrequency = EmailFrequency.IMMEDIATE
    digest_enabled: bool = False
    quiet_hours_enabled: bool = False
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    marketing_enabled: bool = False
    promotional_enabled: bool = False
    timezone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def defaults(cls, user_id: str) -> "NotificationPreferences":
        """Return the preferences a user has before storing any change."""

        return cls(user_id=user_id)

    def channel_enabled(self, channel: Channel) -> bool:
        return {
            Channel.EMAIL: self.email_enabled,
            Channel.PUSH: self.push_enabled,
            Channel.IN_APP: self.in_app_enabled,
        }[channel]

    def allowed_types(self, channel: Channel) -> list[str]:
        return {
            Channel.EMAIL: self.email_types,
            Channel.PUSH: self.push_types,
            Channel.IN_APP: self.in_app_types,
        }[channel]

    def allows_type(self, channel: Channel, notification_type: str) -> bool:
        allowed = self.allowed_types(channel)
        if not allowed or ALL_TYPES in allowed:
            return True
        return notification_type in allowed


class _Unset:
    """Marker for fields a partial update does not touch."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


@dataclass(frozen=True)
class PreferencesUpdate:
    """Partial change to :class:`NotificationPreferences`.

    Only fields that are not ``UNSET`` are written; ``None`` is a real value
    (for example, clearing the quiet hours window).
    """

    email_enabled: bool | _Unset = UNSET
    push_enabled: bool | _Unset = UNSET
    in_app_enabled: bool | _Unset = UNSET
    email_types: list[str] | _Unset = UNSET
    push_types: list[str] | _Unset = UNSET
    in_app_types: list[str] | _Unset = UNSET
    email_frequency: EmailFrequency | _Unset = UNSET
    digest_enabled: bool | _Unset = UNSET
    quiet_hours_enabled: bool | _Unset = UNSET
    quiet_hours_start: str | None | _Unset = UNSET
    quiet_hours_end: str | None | _Unset = UNSET
    marketing_enabled: bool | _Unset = UNSET
    promotional_enabled: bool | _Unset = UNSET
    timezone: str | None | _Unset = UNSET

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> "PreferencesUpdate":
        """Build an update from the keys present in ``values``."""

        known = {item.name for item in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise InvalidPreferencesError(
                f"Unknown preference fields: {', '.join(sorted(unknown))}"
            )
        return cls(**values)

    def provided(self) -> dict[str, Any]:
        """Return the explicitly supplied fields."""

        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.provided()

    def apply_to(self, preferences: NotificationPreferences) -> NotificationPreferences:
        """Return a copy of ``preferences`` with the supplied fields merged in."""

        changes = self.provided()
        for name in ("email_types", "push_types", "in_app_types"):
            if name in changes:
                changes[name] = list(changes[name])
        return replace(preferences, **changes)


__all__ = [
    "ALL_TYPES",
    "Channel",
    "EmailFrequency",
    "NotificationPreferences",
    "PreferencesUpdate",
    "UNSET",
]
