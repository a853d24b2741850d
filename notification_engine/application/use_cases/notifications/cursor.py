"""Opaque pagination cursors built from composite sort keys."""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime
from typing import Any

from notification_engine.domain.entities import Notification
from notification_engine.domain.errors import InvalidCursorError
from notification_engine.domain.query import CursorPosition, SortBy
from notification_engine.utils import ensure_utc

from .filters import ORDERINGS


def _sort_fields(sort_by: SortBy) -> list[str]:
    return [key.field for key in ORDERINGS[sort_by] if key.field != "id"]


def encode_cursor(sort_by: SortBy | str, notification: Notification) -> str:
    """Return the cursor pointing just after ``notification`` for ``sort_by``."""

    ordering = SortBy(sort_by)
    if notification.id is None:
        raise ValueError("Cannot build a cursor for an unsaved notification")

    values: list[Any] = []
    for field in _sort_fields(ordering):
        value = getattr(notification, field)
        if isinstance(value, datetime):
            value = ensure_utc(value).isoformat()
        values.append(value)

    document = {"s": ordering.value, "k": values, "id": notification.id}
    raw = json.dumps(document, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_cursor(sort_by: SortBy | str, token: str) -> CursorPosition:
    """Decode ``token`` issued for ``sort_by``.

    Raises :class:`InvalidCursorError` for malformed tokens and for tokens
    issued under a different ordering.
    """

    ordering = SortBy(sort_by)
    document = _load_document(token)

    issued_for = document.get("s")
    if issued_for != ordering.value:
        raise InvalidCursorError(
            f"Cursor was issued for sort_by={issued_for!r}, not {ordering.value!r}"
        )

    raw_values = document.get("k")
    notification_id = document.get("id")
    fields = _sort_fields(ordering)
    if not isinstance(raw_values, list) or len(raw_values) != len(fields):
        raise InvalidCursorError("Cursor sort key does not match the ordering")
    if not isinstance(notification_id, str) or not notification_id:
        raise InvalidCursorError("Cursor is missing the notification id")

    values = tuple(_parse_value(field, value) for field, value in zip(fields, raw_values))
    return CursorPosition(sort_by=ordering, values=values, id=notification_id)


def _load_document(token: str) -> dict[str, Any]:
    if not isinstance(token, str) or not token.strip():
        raise InvalidCursorError("Cursor is empty")
    padded = token.strip() + "=" * (-len(token.strip()) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        document = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidCursorError("Cursor is malformed") from exc
    if not isinstance(document, dict):
        raise InvalidCursorError("Cursor is malformed")
    return document


def _parse_value(field: str, value: Any) -> Any:
    if not isinstance(value, str):
        raise InvalidCursorError(f"Cursor value for {field} is malformed")
    if field == "created_at":
        try:
            return ensure_utc(datetime.fromisoformat(value))
        except ValueError as exc:
            raise InvalidCursorError("Cursor timestamp is malformed") from exc
    return value


__all__ = ["decode_cursor", "encode_cursor"]
