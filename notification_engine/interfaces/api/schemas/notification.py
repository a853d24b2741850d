"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=50)
    message: str = Field(..., min_length=1)
    link: str | None = Field(default=None, max_length=512)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    user_id: str
    type: str
    message: str
    link: str | None = None
    read: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationPageRead(BaseModel):
    items: list[NotificationRead]
    next_cursor: str | None = None
    has_more: bool = False


class NotificationIdsRequest(BaseModel):
    """Payload carrying the identifiers targeted by a bulk operation."""

    ids: list[str] = Field(..., min_length=1, description="Notification identifiers")


class BulkReadRequest(NotificationIdsRequest):
    batch_size: int | None = Field(
        default=None,
        ge=10,
        le=500,
        description="Chunk size; when omitted the whole list is one chunk",
    )


class FailedIdRead(BaseModel):
    id: str
    reason: str

    model_config = ConfigDict(from_attributes=True)


class BatchResultRead(BaseModel):
    requested: int
    succeeded: int
    failed: int
    affected: int
    failures: list[FailedIdRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class AffectedRead(BaseModel):
    affected: int


class NotificationCountsRead(BaseModel):
    total: int
    unread: int
    read: int

    model_config = ConfigDict(from_attributes=True)


class UnreadCountRead(BaseModel):
    unread: int


class NotificationStatsRead(NotificationCountsRead):
    by_type: dict[str, int] = Field(default_factory=dict)


class NotificationAnalyticsRead(BaseModel):
    window_days: int
    total_in_window: int
    unread_in_window: int
    read_in_window: int
    read_rate: float
    by_type: dict[str, int] = Field(default_factory=dict)
    daily_activity: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "AffectedRead",
    "BatchResultRead",
    "BulkReadRequest",
    "FailedIdRead",
    "NotificationAnalyticsRead",
    "NotificationCountsRead",
    "NotificationCreate",
    "NotificationIdsRequest",
    "NotificationPageRead",
    "NotificationRead",
    "NotificationStatsRead",
    "UnreadCountRead",
]
