"""Preference schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from notification_engine.domain.entities import EmailFrequency


class PreferencesRead(BaseModel):
    user_id: str
    email_enabled: bool
    push_enabled: bool
    in_app_enabled: bool
    email_types: list[str]
    push_types: list[str]
    in_app_types: list[str]
    email_frequency: EmailFrequency
    digest_enabled: bool
    quiet_hours_enabled: bool
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    marketing_enabled: bool
    promotional_enabled: bool
    timezone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PreferencesPatch(BaseModel):
    """Partial update; only the fields present in the request body are applied."""

    email_enabled: bool | None = None
    push_enabled: bool | None = None
    in_app_enabled: bool | None = None
    email_types: list[str] | None = None
    push_types: list[str] | None = None
    in_app_types: list[str] | None = None
    email_frequency: str | None = None
    digest_enabled: bool | None = None
    quiet_hours_enabled: bool | None = None
    quiet_hours_start: str | None = Field(default=None, max_length=5)
    quiet_hours_end: str | None = Field(default=None, max_length=5)
    marketing_enabled: bool | None = None
    promotional_enabled: bool | None = None
    timezone: str | None = Field(default=None, max_length=64)

    model_config = ConfigDict(extra="forbid")


class DeliveryDecisionRead(BaseModel):
    eligible: bool
    digest: bool = False
    deferred_until: datetime | None = None
    reason: str | None = None

    model_config = ConfigDict(from_attributes=True)


class QuietHoursRead(BaseModel):
    in_quiet_hours: bool


__all__ = [
    "DeliveryDecisionRead",
    "PreferencesPatch",
    "PreferencesRead",
    "QuietHoursRead",
]
