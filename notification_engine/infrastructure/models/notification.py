"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text
from sqlalchemy.sql import expression

from notification_engine.infrastructure.database import Base
from notification_engine.utils import now_naive_utc


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_created", "user_id", "created_at", "id"),
        Index("ix_notification_user_type", "user_id", "type", "created_at"),
        Index("ix_notification_user_read", "user_id", "read"),
    )

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(512), nullable=True)
    read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=now_naive_utc)
    updated_at = Column(DateTime(), nullable=False, default=now_naive_utc)
    digested_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
