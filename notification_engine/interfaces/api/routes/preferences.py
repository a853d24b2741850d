"""Endpoints for reading and updating notification preferences."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from notification_engine.application.engine import NotificationEngine
from notification_engine.domain.entities import NotificationPreferences, PreferencesUpdate
from notification_engine.interfaces.api.dependencies import get_current_user_id, get_engine
from notification_engine.interfaces.api.routes_helpers import translate_errors
from notification_engine.interfaces.api.schemas import (
    DeliveryDecisionRead,
    PreferencesPatch,
    PreferencesRead,
    QuietHoursRead,
)

router = APIRouter(prefix="/preferences", tags=["preferences"])


def _to_read_model(preferences: NotificationPreferences) -> PreferencesRead:
    return PreferencesRead.model_validate(preferences)


@router.get("/", response_model=PreferencesRead)
def read_preferences(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> PreferencesRead:
    """Return the stored preferences, or the defaults for a new user."""

    with translate_errors():
        preferences = engine.get_preferences(user_id)
    return _to_read_model(preferences)


@router.patch("/", response_model=PreferencesRead)
def update_preferences(
    payload: PreferencesPatch,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> PreferencesRead:
    """Apply the fields present in the body and keep every other value."""

    update_data = payload.model_dump(exclude_unset=True)
    with translate_errors():
        update = PreferencesUpdate.from_mapping(update_data)
        preferences = engine.update_preferences(user_id, update)
    return _to_read_model(preferences)


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def delete_preferences(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> None:
    with translate_errors():
        engine.delete_preferences(user_id)


@router.get("/should-send", response_model=DeliveryDecisionRead)
def check_delivery(
    notification_type: str = Query(..., alias="type", min_length=1),
    channel: str = Query(...),
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> DeliveryDecisionRead:
    """Evaluate whether a notification may be delivered on ``channel`` now."""

    with translate_errors():
        decision = engine.evaluate_for_user(user_id, notification_type, channel)
    return DeliveryDecisionRead.model_validate(decision)


@router.get("/quiet-hours", response_model=QuietHoursRead)
def read_quiet_hours(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> QuietHoursRead:
    with translate_errors():
        in_quiet_hours = engine.is_in_quiet_hours(user_id)
    return QuietHoursRead(in_quiet_hours=in_quiet_hours)


__all__ = ["router"]
