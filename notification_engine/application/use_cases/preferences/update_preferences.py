"""Use case for partially updating the preferences of a user."""

import logging

from notification_engine.domain.entities import (
    NotificationPreferences,
    PreferencesUpdate,
)
from notification_engine.domain.interfaces import PreferenceStore

from .validators import ensure_quiet_hours_window, validate_update

logger = logging.getLogger(__name__)


def update_preferences(
    store: PreferenceStore,
    *,
    user_id: str,
    update: PreferencesUpdate,
) -> NotificationPreferences:
    """Merge the supplied fields of ``update`` into the user's preferences.

    Fields left ``UNSET`` keep their stored value, or the default when the
    record is created by this call.
    """

    validated = validate_update(update)
    current = store.get(user_id) or NotificationPreferences.defaults(user_id)
    merged = validated.apply_to(current)
    ensure_quiet_hours_window(
        merged.quiet_hours_enabled, merged.quiet_hours_start, merged.quiet_hours_end
    )

    saved = store.upsert(user_id, validated)
    logger.info(
        "Updated notification preferences for user %s (%s)",
        user_id,
        ", ".join(sorted(validated.provided())) or "no changes",
    )
    return saved


__all__ = ["update_preferences"]
