"""Chunked execution of bulk id-list mutations with continue-on-error."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Final, Union

from notification_engine.domain.errors import InvalidFilterError

logger = logging.getLogger(__name__)

MIN_BATCH_SIZE: Final[int] = 10
MAX_BATCH_SIZE: Final[int] = 500
DEFAULT_BATCH_SIZE: Final[int] = 100

ChunkMutation = Callable[[Sequence[str]], int]


@dataclass(frozen=True)
class ChunkSuccess:
    """A chunk whose statement committed. ``affected`` may be below ``len(ids)``."""

    index: int
    ids: tuple[str, ...]
    affected: int


@dataclass(frozen=True)
class ChunkFailure:
    """A chunk whose statement raised; none of its ids were changed."""

    index: int
    ids: tuple[str, ...]
    reason: str


ChunkResult = Union[ChunkSuccess, ChunkFailure]


@dataclass(frozen=True)
class FailedId:
    id: str
    reason: str


@dataclass
class BatchResult:
    """Aggregate outcome of a bulk mutation.

    Bulk helpers drop blank and repeated ids before chunking, so
    ``requested`` counts the distinct ids processed, not the length of the
    caller's list. ``succeeded + failed == requested`` always holds.
    """

    requested: int = 0
    succeeded: int = 0
    failed: int = 0
    affected: int = 0
    chunks: list[ChunkResult] = field(default_factory=list)
    failures: list[FailedId] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def record(self, outcome: ChunkResult) -> None:
        self.chunks.append(outcome)
        if isinstance(outcome, ChunkSuccess):
            self.succeeded += len(outcome.ids)
            self.affected += outcome.affected
        else:
            self.failed += len(outcome.ids)
            self.failures.extend(FailedId(id=i, reason=outcome.reason) for i in outcome.ids)


def validate_batch_size(batch_size: int) -> int:
    if isinstance(batch_size, bool) or not isinstance(batch_size, int):
        raise InvalidFilterError("batch_size must be an integer")
    if not MIN_BATCH_SIZE <= batch_size <= MAX_BATCH_SIZE:
        raise InvalidFilterError(
            f"batch_size must be between {MIN_BATCH_SIZE} and {MAX_BATCH_SIZE}"
        )
    return batch_size


def partition(ids: Sequence[str], size: int) -> list[tuple[str, ...]]:
    """Split ``ids`` into consecutive chunks of at most ``size`` items."""

    if size < 1:
        raise ValueError("size must be positive")
    return [tuple(ids[start : start + size]) for start in range(0, len(ids), size)]


def execute_chunks(
    chunks: Iterable[Sequence[str]], mutate: ChunkMutation
) -> BatchResult:
    """Apply ``mutate`` to every chunk in order, recording each outcome.

    An exception raised by one chunk is captured as a :class:`ChunkFailure`
    and never stops the following chunks.
    """

    result = BatchResult()
    for index, chunk in enumerate(chunks):
        ids = tuple(chunk)
        if not ids:
            continue
        result.requested += len(ids)
        try:
            affected = mutate(ids)
        except Exception as exc:
            logger.warning(
                "Chunk %s with %s ids failed: %s", index, len(ids), exc
            )
            result.record(ChunkFailure(index=index, ids=ids, reason=str(exc) or repr(exc)))
            continue
        result.record(ChunkSuccess(index=index, ids=ids, affected=int(affected or 0)))
    return result


def run_batched(
    ids: Sequence[str],
    mutate: ChunkMutation,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> BatchResult:
    """Partition ``ids`` into chunks of ``batch_size`` and mutate them sequentially."""

    size = validate_batch_size(batch_size)
    return execute_chunks(partition(list(ids), size), mutate)


def unique_ids(ids: Iterable[str | None]) -> list[str]:
    """Return ``ids`` without duplicates or blanks, preserving order."""

    unique: list[str] = []
    seen: set[str] = set()
    for notification_id in ids:
        if not notification_id or notification_id in seen:
            continue
        seen.add(notification_id)
        unique.append(notification_id)
    return unique


__all__ = [
    "BatchResult",
    "ChunkFailure",
    "ChunkMutation",
    "ChunkResult",
    "ChunkSuccess",
    "DEFAULT_BATCH_SIZE",
    "FailedId",
    "MAX_BATCH_SIZE",
    "MIN_BATCH_SIZE",
    "execute_chunks",
    "partition",
    "run_batched",
    "unique_ids",
]
