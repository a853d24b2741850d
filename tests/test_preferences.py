"""Tests for stored preferences and their partial updates."""

from __future__ import annotations

import pytest

from notification_engine.application.use_cases.preferences import (
    delete_preferences,
    get_preferences,
    update_preferences,
)
from notification_engine.domain.entities import (
    UNSET,
    EmailFrequency,
    NotificationPreferences,
    PreferencesUpdate,
)
from notification_engine.domain.errors import InvalidPreferencesError


def test_unknown_user_gets_defaults_without_a_stored_record(preference_store):
    preferences = get_preferences(preference_store, user_id="new-user")

    assert preferences == NotificationPreferences.defaults("new-user")
    assert preference_store.get("new-user") is None


def test_first_update_merges_into_defaults(preference_store):
    saved = update_preferences(
        preference_store, user_id="u1", update=PreferencesUpdate(push_enabled=False)
    )

    assert saved.push_enabled is False
    assert saved.email_enabled is True
    assert saved.in_app_enabled is True
    assert saved.email_frequency is EmailFrequency.IMMEDIATE
    assert saved.marketing_enabled is False
    assert saved.created_at is not None
    assert preference_store.get("u1").push_enabled is False


def test_unset_fields_keep_stored_values(preference_store):
    update_preferences(
        preference_store,
        user_id="u1",
        update=PreferencesUpdate(email_types=["alert", "alert", " billing "], digest_enabled=True),
    )

    saved = update_preferences(
        preference_store,
        user_id="u1",
        update=PreferencesUpdate(email_frequency="daily"),
    )

    assert saved.email_types == ["alert", "billing"]
    assert saved.digest_enabled is True
    assert saved.email_frequency is EmailFrequency.DAILY


def test_none_clears_quiet_hours_times(preference_store):
    update_preferences(
        preference_store,
        user_id="u1",
        update=PreferencesUpdate(
            quiet_hours_enabled=True, quiet_hours_start="22:00", quiet_hours_end="07:30"
        ),
    )

    saved = update_preferences(
        preference_store,
        user_id="u1",
        update=PreferencesUpdate(
            quiet_hours_enabled=False, quiet_hours_start=None, quiet_hours_end=None
        ),
    )

    assert saved.quiet_hours_start is None
    assert saved.quiet_hours_end is None


@pytest.mark.parametrize(
    "update",
    [
        PreferencesUpdate(email_frequency="monthly"),
        PreferencesUpdate(quiet_hours_start="25:00"),
        PreferencesUpdate(timezone="Not/AZone"),
        PreferencesUpdate(push_enabled="yes"),
        PreferencesUpdate(email_types="alert"),
        PreferencesUpdate(quiet_hours_enabled=True),
    ],
)
def test_invalid_updates_are_rejected(preference_store, update):
    with pytest.raises(InvalidPreferencesError):
        update_preferences(preference_store, user_id="u1", update=update)

    assert preference_store.get("u1") is None


def test_update_from_mapping_rejects_unknown_fields():
    with pytest.raises(InvalidPreferencesError):
        PreferencesUpdate.from_mapping({"sms_enabled": True})

    update = PreferencesUpdate.from_mapping({"push_enabled": False})
    assert update.provided() == {"push_enabled": False}
    assert update.email_enabled is UNSET


def test_delete_restores_defaults(preference_store):
    update_preferences(
        preference_store, user_id="u1", update=PreferencesUpdate(email_enabled=False)
    )

    assert delete_preferences(preference_store, user_id="u1") is True
    assert delete_preferences(preference_store, user_id="u1") is False
    assert get_preferences(preference_store, user_id="u1").email_enabled is True
