"""FastAPI dependency utilities."""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from notification_engine.application.engine import NotificationEngine
from notification_engine.infrastructure.database import get_db


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the acting user taken from the ``X-User-Id`` header."""

    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return user_id


def get_engine(db: Session = Depends(get_db)) -> NotificationEngine:
    """Build a request-scoped engine over the current database session."""

    return NotificationEngine.from_session(db)


__all__ = ["get_current_user_id", "get_engine"]
