"""SQLAlchemy model for per-user notification preferences."""

from sqlalchemy import JSON, Boolean, Column, DateTime, String

from notification_engine.infrastructure.database import Base
from notification_engine.utils import now_naive_utc


class NotificationPreferenceModel(Base):
    """One row of delivery preferences per user."""

    __tablename__ = "notification_preference"

    user_id = Column(String(64), primary_key=True)
    email_enabled = Column(Boolean, nullable=False, default=True)
    push_enabled = Column(Boolean, nullable=False, default=True)
    in_app_enabled = Column(Boolean, nullable=False, default=True)
    email_types = Column(JSON, nullable=False, default=list)
    push_types = Column(JSON, nullable=False, default=list)
    in_app_types = Column(JSON, nullable=False, default=list)
    email_frequency = Column(String(16), nullable=False, default="immediate")
    digest_enabled = Column(Boolean, nullable=False, default=False)
    quiet_hours_enabled = Column(Boolean, nullable=False, default=False)
    quiet_hours_start = Column(String(5), nullable=True)
    quiet_hours_end = Column(String(5), nullable=True)
    marketing_enabled = Column(Boolean, nullable=False, default=False)
    promotional_enabled = Column(Boolean, nullable=False, default=False)
    timezone = Column(String(64), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_naive_utc)
    updated_at = Column(DateTime(), nullable=False, default=now_naive_utc)


__all__ = ["NotificationPreferenceModel"]
