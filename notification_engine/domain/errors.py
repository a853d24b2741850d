"""Typed failures raised by the notification engine."""

from __future__ import annotations


class NotificationEngineError(Exception):
    """Base class for every error raised by the engine."""


class NotificationNotFoundError(NotificationEngineError, LookupError):
    """A single-item mutation targeted a notification that does not exist."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification with id {notification_id} not found")
        self.notification_id = notification_id


class InvalidCursorError(NotificationEngineError, ValueError):
    """The pagination cursor is malformed or was issued for another ordering."""


class InvalidFilterError(NotificationEngineError, ValueError):
    """A filter, limit or batch size is outside its accepted range."""


class InvalidPreferencesError(NotificationEngineError, ValueError):
    """A preference update carries a value that cannot be stored."""


class StoreFaultError(NotificationEngineError):
    """The underlying persistence layer failed.

    The original exception is preserved as ``__cause__``.
    """

    def __init__(self, operation: str, detail: str | None = None) -> None:
        message = f"Store operation '{operation}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.operation = operation


__all__ = [
    "NotificationEngineError",
    "NotificationNotFoundError",
    "InvalidCursorError",
    "InvalidFilterError",
    "InvalidPreferencesError",
    "StoreFaultError",
]
