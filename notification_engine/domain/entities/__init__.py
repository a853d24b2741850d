"""Domain entities exposed by the application."""

from .notification import Notification
from .preferences import (
    ALL_TYPES,
    UNSET,
    Channel,
    EmailFrequency,
    NotificationPreferences,
    PreferencesUpdate,
)

__all__ = [
    "ALL_TYPES",
    "UNSET",
    "Channel",
    "EmailFrequency",
    "Notification",
    "NotificationPreferences",
    "PreferencesUpdate",
]
