"""Helper utilities shared across API route handlers."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from notification_engine.domain.errors import (
    NotificationNotFoundError,
    StoreFaultError,
)

logger = logging.getLogger(__name__)


@contextmanager
def translate_errors() -> Iterator[None]:
    """Convert engine errors raised inside the block into HTTP errors.

    Invalid cursors, filters and preferences are all ``ValueError`` subclasses
    and map to 400 together with plain validation errors.
    """

    try:
        yield
    except NotificationNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {exc.notification_id} not found",
        ) from exc
    except StoreFaultError as exc:
        logger.error("Store fault during %s", exc.operation)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification store unavailable",
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


__all__ = ["translate_errors"]
