"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: str | None
    user_id: str
    type: str
    message: str
    link: str | None = None
    read: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    digested_at: datetime | None = None


__all__ = ["Notification"]
