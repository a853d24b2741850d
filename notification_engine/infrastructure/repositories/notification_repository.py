"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any

from sqlalchemy import and_, case, false, func, or_, true
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from notification_engine.domain.entities import Notification
from notification_engine.domain.errors import StoreFaultError
from notification_engine.domain.query import (
    CursorPosition,
    GroupedCount,
    NotificationCounts,
    NotificationPredicate,
    OrderKey,
    QueryDescriptor,
)
from notification_engine.infrastructure.models import NotificationModel
from notification_engine.utils import ensure_utc, now_utc, to_naive_utc

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "created_at": NotificationModel.created_at,
    "type": NotificationModel.type,
    "id": NotificationModel.id,
}
_PATCHABLE_COLUMNS = {
    "read": NotificationModel.read,
    "updated_at": NotificationModel.updated_at,
    "digested_at": NotificationModel.digested_at,
}


class NotificationRepository:
    """SQLAlchemy implementation of the notification store.

    Every write commits on its own, so a bulk statement is one transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(
        self,
        user_id: str,
        query: QueryDescriptor,
        *,
        cursor: CursorPosition | None = None,
        limit: int | None = None,
    ) -> Sequence[Notification]:
        with self._guard("find"):
            statement = self._scoped(user_id, query.predicate)
            if cursor is not None:
                statement = statement.filter(self._keyset_clause(query.order, cursor))
            statement = statement.order_by(*self._order_clauses(query.order))
            if limit is not None:
                statement = statement.limit(limit)
            return [self._to_entity(model) for model in statement.all()]

    def count_aggregate(
        self, user_id: str, predicate: NotificationPredicate
    ) -> NotificationCounts:
        unread = func.coalesce(
            func.sum(case((NotificationModel.read == false(), 1), else_=0)), 0
        )
        with self._guard("count_aggregate"):
            total, unread_count = (
                self.session.query(func.count(NotificationModel.id), unread)
                .filter(NotificationModel.user_id == user_id)
                .filter(*self._predicate_clauses(predicate))
                .one()
            )
        total = int(total or 0)
        unread_count = int(unread_count or 0)
        return NotificationCounts(
            total=total, unread=unread_count, read=total - unread_count
        )

    def group_counts(
        self, user_id: str, predicate: NotificationPredicate, *, by_day: bool = False
    ) -> Sequence[GroupedCount]:
        group_columns: list[Any] = [NotificationModel.type, NotificationModel.read]
        if by_day:
            group_columns.append(func.date(NotificationModel.created_at))
        with self._guard("group_counts"):
            rows = (
                self.session.query(*group_columns, func.count(NotificationModel.id))
                .filter(NotificationModel.user_id == user_id)
                .filter(*self._predicate_clauses(predicate))
                .group_by(*group_columns)
                .all()
            )
        groups: list[GroupedCount] = []
        for row in rows:
            day = _coerce_day(row[2]) if by_day else None
            groups.append(
                GroupedCount(
                    type=row[0], read=bool(row[1]), day=day, count=int(row[-1])
                )
            )
        return groups

    def get_by_id(self, notification_id: str) -> Notification | None:
        with self._guard("get_by_id"):
            model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def get_many(self, user_id: str, ids: Sequence[str]) -> Sequence[Notification]:
        if not ids:
            return []
        with self._guard("get_many"):
            models = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.user_id == user_id)
                .filter(NotificationModel.id.in_(list(ids)))
                .order_by(
                    NotificationModel.created_at.desc(), NotificationModel.id.desc()
                )
                .all()
            )
        return [self._to_entity(model) for model in models]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        with self._guard("create"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def update_by_id(self, notification_id: str, patch: dict[str, Any]) -> int:
        with self._guard("update_by_id"):
            affected = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.id == notification_id)
                .update(self._patch_values(patch), synchronize_session=False)
            )
            self.session.commit()
        return int(affected or 0)

    def update_by_predicate(
        self,
        user_id: str | None,
        predicate: NotificationPredicate,
        patch: dict[str, Any],
    ) -> int:
        with self._guard("update_by_predicate"):
            affected = self._scoped(user_id, predicate).update(
                self._patch_values(patch), synchronize_session=False
            )
            self.session.commit()
        return int(affected or 0)

    def delete_by_id(self, notification_id: str) -> int:
        with self._guard("delete_by_id"):
            affected = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.id == notification_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        return int(affected or 0)

    def delete_by_predicate(
        self, user_id: str | None, predicate: NotificationPredicate
    ) -> int:
        with self._guard("delete_by_predicate"):
            affected = self._scoped(user_id, predicate).delete(
                synchronize_session=False
            )
            self.session.commit()
        return int(affected or 0)

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Notification store operation '%s' failed", operation)
            raise StoreFaultError(operation, exc.__class__.__name__) from exc

    def _scoped(self, user_id: str | None, predicate: NotificationPredicate) -> Query:
        statement = self.session.query(NotificationModel)
        if user_id is not None:
            statement = statement.filter(NotificationModel.user_id == user_id)
        return statement.filter(*self._predicate_clauses(predicate))

    @staticmethod
    def _predicate_clauses(predicate: NotificationPredicate) -> list[Any]:
        clauses: list[Any] = []
        if predicate.search:
            clauses.append(
                NotificationModel.message.icontains(predicate.search, autoescape=True)
            )
        if predicate.types is not None:
            if predicate.types:
                clauses.append(NotificationModel.type.in_(sorted(predicate.types)))
            else:
                clauses.append(false())
        if predicate.read is not None:
            clauses.append(
                NotificationModel.read == (true() if predicate.read else false())
            )
        if predicate.created_from is not None:
            clauses.append(
                NotificationModel.created_at >= to_naive_utc(predicate.created_from)
            )
        if predicate.created_before is not None:
            clauses.append(
                NotificationModel.created_at < to_naive_utc(predicate.created_before)
            )
        if predicate.ids is not None:
            if predicate.ids:
                clauses.append(NotificationModel.id.in_(list(predicate.ids)))
            else:
                clauses.append(false())
        if predicate.pending_digest is True:
            clauses.append(NotificationModel.digested_at.is_(None))
        elif predicate.pending_digest is False:
            clauses.append(NotificationModel.digested_at.is_not(None))
        return clauses

    @staticmethod
    def _order_clauses(order: Sequence[OrderKey]) -> list[Any]:
        clauses = []
        for key in order:
            column = _SORT_COLUMNS[key.field]
            clauses.append(column.desc() if key.descending else column.asc())
        return clauses

    @staticmethod
    def _keyset_clause(order: Sequence[OrderKey], cursor: CursorPosition) -> Any:
        """Return the condition selecting rows strictly after ``cursor``."""

        bounds = [*cursor.values, cursor.id]
        clause = None
        for key, bound in reversed(list(zip(order, bounds))):
            column = _SORT_COLUMNS[key.field]
            if isinstance(bound, datetime):
                bound = to_naive_utc(bound)
            after = column < bound if key.descending else column > bound
            clause = after if clause is None else or_(after, and_(column == bound, clause))
        return clause

    @staticmethod
    def _patch_values(patch: dict[str, Any]) -> dict[Any, Any]:
        values: dict[Any, Any] = {}
        for name, value in patch.items():
            column = _PATCHABLE_COLUMNS.get(name)
            if column is None:
                raise ValueError(f"Column '{name}' cannot be patched")
            values[column] = to_naive_utc(value) if isinstance(value, datetime) else value
        return values

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        created_at = notification.created_at or now_utc()
        model.id = notification.id or uuid.uuid4().hex
        model.user_id = notification.user_id
        model.type = notification.type
        model.message = notification.message
        model.link = notification.link
        model.read = notification.read
        model.created_at = to_naive_utc(created_at)
        model.updated_at = to_naive_utc(notification.updated_at or created_at)
        model.digested_at = to_naive_utc(notification.digested_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=model.type,
            message=model.message,
            link=model.link,
            read=bool(model.read),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
            digested_at=ensure_utc(model.digested_at),
        )


def _coerce_day(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


__all__ = ["NotificationRepository"]
