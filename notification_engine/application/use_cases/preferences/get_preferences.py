"""Use case for reading the preferences of a user."""

from notification_engine.domain.entities import NotificationPreferences
from notification_engine.domain.interfaces import PreferenceStore


def get_preferences(store: PreferenceStore, *, user_id: str) -> NotificationPreferences:
    """Return the stored preferences, or the defaults when none were saved."""

    preferences = store.get(user_id)
    if preferences is None:
        return NotificationPreferences.defaults(user_id)
    return preferences


__all__ = ["get_preferences"]
