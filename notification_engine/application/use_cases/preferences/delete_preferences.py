"""Use case for removing the stored preferences of a user."""

import logging

from notification_engine.domain.interfaces import PreferenceStore

logger = logging.getLogger(__name__)


def delete_preferences(store: PreferenceStore, *, user_id: str) -> bool:
    """Delete the record so the defaults apply again. Returns ``True`` if one existed."""

    removed = store.delete(user_id) > 0
    if removed:
        logger.info("Deleted notification preferences for user %s", user_id)
    return removed


__all__ = ["delete_preferences"]
