"""Digest flush hook invoked by the external scheduler."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from notification_engine.domain.entities import Notification
from notification_engine.domain.interfaces import NotificationStore
from notification_engine.domain.query import NotificationPredicate, QueryDescriptor, SortBy
from notification_engine.utils import ensure_utc, now_utc

from .batching import DEFAULT_BATCH_SIZE, BatchResult, run_batched, validate_batch_size
from .filters import ORDERINGS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Digest:
    """Accumulated notifications handed to the transmission layer as one unit."""

    user_id: str
    notifications: tuple[Notification, ...]
    generated_at: datetime


DigestTransmitter = Callable[[Digest], None]


@dataclass
class DigestFlushResult:
    user_id: str
    delivered: int
    stamped: BatchResult = field(default_factory=BatchResult)


_PENDING = NotificationPredicate(read=False, pending_digest=True)


def flush_digest(
    store: NotificationStore,
    *,
    user_id: str,
    transmit: DigestTransmitter,
    batch_size: int = DEFAULT_BATCH_SIZE,
    reference: datetime | None = None,
) -> DigestFlushResult:
    """Send pending notifications of ``user_id`` as one digest.

    Pending means unread and never included in a previous digest. Items are
    stamped with ``digested_at`` only after ``transmit`` returns; if it raises,
    nothing is stamped and the exception propagates.
    """

    size = validate_batch_size(batch_size)
    query = QueryDescriptor(
        sort_by=SortBy.OLDEST, predicate=_PENDING, order=ORDERINGS[SortBy.OLDEST]
    )
    pending = list(store.find(user_id, query))
    if not pending:
        logger.debug("No pending digest items for user %s", user_id)
        return DigestFlushResult(user_id=user_id, delivered=0)

    generated_at = ensure_utc(reference) or now_utc()
    transmit(
        Digest(user_id=user_id, notifications=tuple(pending), generated_at=generated_at)
    )

    def stamp(chunk: Sequence[str]) -> int:
        predicate = NotificationPredicate(ids=tuple(chunk), pending_digest=True)
        return store.update_by_predicate(
            user_id, predicate, {"digested_at": generated_at}
        )

    stamped = run_batched(
        [notification.id for notification in pending if notification.id],
        stamp,
        batch_size=size,
    )
    logger.info(
        "Flushed digest with %s notifications for user %s (%s stamp failures)",
        len(pending),
        user_id,
        stamped.failed,
    )
    return DigestFlushResult(user_id=user_id, delivered=len(pending), stamped=stamped)


__all__ = ["Digest", "DigestFlushResult", "DigestTransmitter", "flush_digest"]
