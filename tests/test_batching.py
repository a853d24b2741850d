"""Tests for the chunked bulk executor and the bulk conveniences."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from notification_engine.application.use_cases.notifications import (
    ChunkFailure,
    ChunkSuccess,
    bulk_delete,
    bulk_mark_as_read,
    bulk_mark_as_read_optimized,
    bulk_mark_as_unread,
    run_batched,
)
from notification_engine.domain.errors import InvalidFilterError
from notification_engine.infrastructure.repositories import NotificationRepository


def test_failed_chunk_does_not_stop_following_chunks():
    ids = [f"n{i:03d}" for i in range(250)]
    seen_chunks: list[int] = []

    def mutate(chunk):
        seen_chunks.append(len(chunk))
        if chunk[0] == "n100":
            raise RuntimeError("deadlock detected")
        return len(chunk)

    result = run_batched(ids, mutate, batch_size=100)

    assert seen_chunks == [100, 100, 50]
    assert result.requested == 250
    assert result.succeeded == 150
    assert result.failed == 100
    assert result.affected == 150
    assert not result.ok
    assert [type(chunk) for chunk in result.chunks] == [
        ChunkSuccess,
        ChunkFailure,
        ChunkSuccess,
    ]
    assert result.chunks[1].reason == "deadlock detected"
    assert [failure.id for failure in result.failures] == ids[100:200]


@pytest.mark.parametrize("batch_size", [0, 9, 501, True])
def test_batch_size_outside_range_is_rejected(batch_size):
    with pytest.raises(InvalidFilterError):
        run_batched(["a"], lambda chunk: 1, batch_size=batch_size)


def test_empty_id_list_runs_no_chunk():
    calls = []

    result = run_batched([], lambda chunk: calls.append(chunk) or 0, batch_size=10)

    assert calls == []
    assert result.requested == 0
    assert result.ok


def test_bulk_mark_as_read_dedupes_and_ignores_unknown_ids(store, make_notification):
    first = make_notification()
    second = make_notification()

    result = bulk_mark_as_read(store, [first.id, "", first.id, second.id, "missing"])

    assert result.requested == 3
    assert result.succeeded + result.failed == result.requested
    assert result.succeeded == 3
    assert result.affected == 2
    assert len(result.chunks) == 1
    assert store.get_by_id(first.id).read is True
    assert store.get_by_id(second.id).read is True


def test_bulk_mark_as_unread_only_touches_read_rows(store, make_notification):
    already_unread = make_notification()
    read = make_notification(read=True)

    result = bulk_mark_as_unread(store, [already_unread.id, read.id])

    assert result.affected == 1
    assert store.get_by_id(read.id).read is False


def test_bulk_operations_respect_user_scope(store, make_notification):
    mine = make_notification(user_id="u1")
    theirs = make_notification(user_id="u2")

    result = bulk_delete(store, [mine.id, theirs.id], user_id="u1")

    assert result.affected == 1
    assert store.get_by_id(mine.id) is None
    assert store.get_by_id(theirs.id) is not None


def test_optimized_bulk_read_uses_chunks(store, make_notification):
    ids = [make_notification().id for _ in range(25)]

    result = bulk_mark_as_read_optimized(store, ids, batch_size=10)

    assert [len(chunk.ids) for chunk in result.chunks] == [10, 10, 5]
    assert result.affected == 25
    assert all(store.get_by_id(i).read for i in ids)


class _SecondUpdateFails(NotificationRepository):
    """Repository whose second bulk update fails after writing, before commit."""

    def __init__(self, session):
        super().__init__(session)
        self.update_calls = 0

    def update_by_predicate(self, user_id, predicate, patch):
        self.update_calls += 1
        if self.update_calls != 2:
            return super().update_by_predicate(user_id, predicate, patch)
        with self._guard("update_by_predicate"):
            self._scoped(user_id, predicate).update(
                self._patch_values(patch), synchronize_session=False
            )
            raise OperationalError("UPDATE notification", {}, Exception("lock timeout"))


def test_store_fault_in_one_chunk_rolls_back_only_that_chunk(session, make_notification):
    ids = [make_notification().id for _ in range(25)]
    store = _SecondUpdateFails(session)

    result = bulk_mark_as_read_optimized(store, ids, batch_size=10)

    assert (result.succeeded, result.failed) == (15, 10)
    assert isinstance(result.chunks[1], ChunkFailure)
    assert "update_by_predicate" in result.chunks[1].reason
    assert isinstance(result.chunks[2], ChunkSuccess)
    assert [failure.id for failure in result.failures] == ids[10:20]
    read_state = {i: store.get_by_id(i).read for i in ids}
    assert [i for i in ids if read_state[i]] == ids[:10] + ids[20:]
