"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .preference_repository import NotificationPreferenceRepository

__all__ = [
    "NotificationPreferenceRepository",
    "NotificationRepository",
]
