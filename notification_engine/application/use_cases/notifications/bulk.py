"""Bulk id-list mutations built on the batch executor."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from notification_engine.domain.interfaces import NotificationStore
from notification_engine.domain.query import NotificationPredicate
from notification_engine.utils import now_utc

from .batching import (
    DEFAULT_BATCH_SIZE,
    BatchResult,
    ChunkMutation,
    execute_chunks,
    run_batched,
    unique_ids,
    validate_batch_size,
)

logger = logging.getLogger(__name__)


def bulk_mark_as_read(
    store: NotificationStore, ids: Iterable[str], *, user_id: str | None = None
) -> BatchResult:
    """Mark ``ids`` as read in a single statement."""

    return _run_unbatched(
        "mark_as_read", unique_ids(ids), _read_state_mutation(store, user_id, read=True)
    )


def bulk_mark_as_unread(
    store: NotificationStore, ids: Iterable[str], *, user_id: str | None = None
) -> BatchResult:
    """Mark ``ids`` as unread in a single statement."""

    return _run_unbatched(
        "mark_as_unread",
        unique_ids(ids),
        _read_state_mutation(store, user_id, read=False),
    )


def bulk_delete(
    store: NotificationStore, ids: Iterable[str], *, user_id: str | None = None
) -> BatchResult:
    """Delete ``ids`` in a single statement; unknown ids are ignored."""

    return _run_unbatched("delete", unique_ids(ids), _delete_mutation(store, user_id))


def bulk_mark_as_read_optimized(
    store: NotificationStore,
    ids: Iterable[str],
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    user_id: str | None = None,
) -> BatchResult:
    """Mark a large list of ids as read, one transaction per chunk."""

    size = validate_batch_size(batch_size)
    result = run_batched(
        unique_ids(ids),
        _read_state_mutation(store, user_id, read=True),
        batch_size=size,
    )
    _log_result("mark_as_read_optimized", result)
    return result


def _read_state_mutation(
    store: NotificationStore, user_id: str | None, *, read: bool
) -> ChunkMutation:
    def mutate(chunk: Sequence[str]) -> int:
        predicate = NotificationPredicate(ids=tuple(chunk), read=not read)
        return store.update_by_predicate(
            user_id, predicate, {"read": read, "updated_at": now_utc()}
        )

    return mutate


def _delete_mutation(store: NotificationStore, user_id: str | None) -> ChunkMutation:
    def mutate(chunk: Sequence[str]) -> int:
        return store.delete_by_predicate(user_id, NotificationPredicate(ids=tuple(chunk)))

    return mutate


def _run_unbatched(
    operation: str, ids: Sequence[str], mutate: ChunkMutation
) -> BatchResult:
    result = execute_chunks([ids] if ids else [], mutate)
    _log_result(operation, result)
    return result


def _log_result(operation: str, result: BatchResult) -> None:
    if result.failed:
        logger.warning(
            "Bulk %s finished with %s of %s ids failed across %s chunks",
            operation,
            result.failed,
            result.requested,
            len(result.chunks),
        )
    else:
        logger.info(
            "Bulk %s updated %s rows for %s requested ids",
            operation,
            result.affected,
            result.requested,
        )


__all__ = [
    "bulk_delete",
    "bulk_mark_as_read",
    "bulk_mark_as_read_optimized",
    "bulk_mark_as_unread",
]
