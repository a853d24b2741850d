"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_utc,
    get_app_timezone,
    now_naive_utc,
    now_utc,
    resolve_timezone,
    to_naive_utc,
)

__all__ = [
    "ensure_utc",
    "get_app_timezone",
    "now_naive_utc",
    "now_utc",
    "resolve_timezone",
    "to_naive_utc",
]
