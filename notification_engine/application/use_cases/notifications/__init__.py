"""Notification retrieval, mutation, batching and analytics use cases."""

from .analytics import NotificationAnalytics, NotificationStats, get_analytics, get_stats
from .batching import (
    BatchResult,
    ChunkFailure,
    ChunkSuccess,
    FailedId,
    run_batched,
)
from .bulk import (
    bulk_delete,
    bulk_mark_as_read,
    bulk_mark_as_read_optimized,
    bulk_mark_as_unread,
)
from .cursor import decode_cursor, encode_cursor
from .digest import Digest, DigestFlushResult, DigestTransmitter, flush_digest
from .filters import build_filter_spec, compile_filter
from .mutations import (
    create_notification,
    delete_all_notifications,
    delete_notification,
    delete_notifications_by_type,
    delete_read_notifications,
    mark_all_as_read,
    mark_as_read,
    mark_as_unread,
)
from .retrieval import (
    CsvExport,
    Page,
    export_notifications,
    export_notifications_csv,
    get_counts,
    get_notifications_batch,
    get_page,
    get_recent,
    get_unread_count,
)

__all__ = [
    "BatchResult",
    "ChunkFailure",
    "ChunkSuccess",
    "CsvExport",
    "Digest",
    "DigestFlushResult",
    "DigestTransmitter",
    "FailedId",
    "NotificationAnalytics",
    "NotificationStats",
    "Page",
    "build_filter_spec",
    "bulk_delete",
    "bulk_mark_as_read",
    "bulk_mark_as_read_optimized",
    "bulk_mark_as_unread",
    "compile_filter",
    "create_notification",
    "decode_cursor",
    "delete_all_notifications",
    "delete_notification",
    "delete_notifications_by_type",
    "delete_read_notifications",
    "encode_cursor",
    "export_notifications",
    "export_notifications_csv",
    "flush_digest",
    "get_analytics",
    "get_counts",
    "get_notifications_batch",
    "get_page",
    "get_recent",
    "get_stats",
    "get_unread_count",
    "mark_all_as_read",
    "mark_as_read",
    "mark_as_unread",
    "run_batched",
]
