"""Endpoints for listing, exporting and mutating the notifications of a user."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response, status

from notification_engine.application.engine import NotificationEngine
from notification_engine.application.use_cases.notifications import (
    BatchResult,
    build_filter_spec,
)
from notification_engine.domain.entities import Notification
from notification_engine.domain.query import FilterSpec
from notification_engine.interfaces.api.dependencies import get_current_user_id, get_engine
from notification_engine.interfaces.api.routes_helpers import translate_errors
from notification_engine.interfaces.api.schemas import (
    AffectedRead,
    BatchResultRead,
    BulkReadRequest,
    NotificationAnalyticsRead,
    NotificationCountsRead,
    NotificationCreate,
    NotificationIdsRequest,
    NotificationPageRead,
    NotificationRead,
    NotificationStatsRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _to_read_model(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(notification)


def _to_batch_model(result: BatchResult) -> BatchResultRead:
    return BatchResultRead.model_validate(result)


def _filters(
    search: str | None = Query(default=None, description="Case-insensitive text in the message"),
    types: list[str] | None = Query(default=None, alias="type"),
    read_status: str | None = Query(default=None, alias="status"),
    date_from: datetime | None = Query(default=None),
    date_to: datetime | None = Query(default=None),
    sort_by: str | None = Query(default=None),
) -> FilterSpec:
    with translate_errors():
        return build_filter_spec(
            search=search,
            types=types,
            status=read_status,
            date_from=date_from,
            date_to=date_to,
            sort_by=sort_by,
        )


@router.get("/", response_model=NotificationPageRead)
def list_notifications(
    cursor: str | None = Query(default=None),
    limit: int | None = Query(default=None),
    filters: FilterSpec = Depends(_filters),
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> NotificationPageRead:
    """Return one page of notifications and the cursor for the next one."""

    with translate_errors():
        page = engine.get_page(user_id, filters, cursor=cursor, limit=limit)
    return NotificationPageRead(
        items=[_to_read_model(item) for item in page.items],
        next_cursor=page.next_cursor,
        has_more=page.has_more,
    )


@router.get("/recent", response_model=list[NotificationRead])
def list_recent_notifications(
    limit: int = Query(default=10),
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> list[NotificationRead]:
    with translate_errors():
        items = engine.get_recent(user_id, limit)
    return [_to_read_model(item) for item in items]


@router.get("/export", response_model=list[NotificationRead])
def export_notifications(
    filters: FilterSpec = Depends(_filters),
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> list[NotificationRead]:
    """Return every notification matching the filters, unpaginated."""

    with translate_errors():
        items = engine.export(user_id, filters)
    return [_to_read_model(item) for item in items]


@router.get("/export/csv")
def export_notifications_csv(
    filters: FilterSpec = Depends(_filters),
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> Response:
    with translate_errors():
        export = engine.export_csv(user_id, filters)
    return Response(
        content=export.content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/counts", response_model=NotificationCountsRead)
def read_counts(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> NotificationCountsRead:
    with translate_errors():
        counts = engine.get_counts_optimized(user_id)
    return NotificationCountsRead.model_validate(counts)


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> UnreadCountRead:
    with translate_errors():
        unread = engine.get_unread_count(user_id)
    return UnreadCountRead(unread=unread)


@router.get("/stats", response_model=NotificationStatsRead)
def read_stats(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> NotificationStatsRead:
    with translate_errors():
        stats = engine.get_stats(user_id)
    return NotificationStatsRead.model_validate(stats, from_attributes=True)


@router.get("/analytics", response_model=NotificationAnalyticsRead)
def read_analytics(
    window_days: int = Query(default=30),
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> NotificationAnalyticsRead:
    with translate_errors():
        analytics = engine.analytics(user_id, window_days)
    return NotificationAnalyticsRead.model_validate(analytics)


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> NotificationRead:
    with translate_errors():
        notification = engine.create_notification(
            user_id, payload.type, payload.message, payload.link
        )
    return _to_read_model(notification)


@router.post("/batch", response_model=list[NotificationRead])
def read_notifications_batch(
    payload: NotificationIdsRequest,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> list[NotificationRead]:
    with translate_errors():
        items = engine.get_notifications_batch(user_id, payload.ids)
    return [_to_read_model(item) for item in items]


@router.post("/read-all", response_model=AffectedRead)
def mark_all_notifications_as_read(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> AffectedRead:
    with translate_errors():
        affected = engine.mark_all_as_read(user_id)
    return AffectedRead(affected=affected)


@router.post("/bulk/read", response_model=BatchResultRead)
def bulk_mark_notifications_as_read(
    payload: BulkReadRequest,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> BatchResultRead:
    """Mark many notifications as read, chunked when ``batch_size`` is given."""

    with translate_errors():
        if payload.batch_size is None:
            result = engine.bulk_mark_as_read(payload.ids, user_id=user_id)
        else:
            result = engine.bulk_mark_as_read_optimized(
                payload.ids, payload.batch_size, user_id=user_id
            )
    return _to_batch_model(result)


@router.post("/bulk/unread", response_model=BatchResultRead)
def bulk_mark_notifications_as_unread(
    payload: NotificationIdsRequest,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> BatchResultRead:
    with translate_errors():
        result = engine.bulk_mark_as_unread(payload.ids, user_id=user_id)
    return _to_batch_model(result)


@router.post("/bulk/delete", response_model=BatchResultRead)
def bulk_delete_notifications(
    payload: NotificationIdsRequest,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> BatchResultRead:
    with translate_errors():
        result = engine.bulk_delete(payload.ids, user_id=user_id)
    return _to_batch_model(result)


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_as_read(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> NotificationRead:
    with translate_errors():
        notification = engine.mark_as_read(notification_id, user_id=user_id)
    return _to_read_model(notification)


@router.post("/{notification_id}/unread", response_model=NotificationRead)
def mark_notification_as_unread(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> NotificationRead:
    with translate_errors():
        notification = engine.mark_as_unread(notification_id, user_id=user_id)
    return _to_read_model(notification)


@router.delete("/", response_model=AffectedRead)
def delete_all_notifications(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> AffectedRead:
    with translate_errors():
        affected = engine.delete_all_notifications(user_id)
    return AffectedRead(affected=affected)


@router.delete("/read", response_model=AffectedRead)
def delete_read_notifications(
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> AffectedRead:
    with translate_errors():
        affected = engine.delete_read_notifications(user_id)
    return AffectedRead(affected=affected)


@router.delete("/type/{notification_type}", response_model=AffectedRead)
def delete_notifications_by_type(
    notification_type: str,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> AffectedRead:
    with translate_errors():
        affected = engine.delete_notifications_by_type(user_id, notification_type)
    return AffectedRead(affected=affected)


@router.delete("/{notification_id}", response_model=AffectedRead)
def delete_notification(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    engine: NotificationEngine = Depends(get_engine),
) -> AffectedRead:
    """Delete one notification; deleting a missing id reports zero rows."""

    with translate_errors():
        affected = engine.delete(notification_id, user_id=user_id)
    return AffectedRead(affected=affected)


__all__ = ["router"]
