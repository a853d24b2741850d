"""Integration tests for pagination, exports and counters."""

from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import BASE_TIME
from notification_engine.application.use_cases.notifications import (
    build_filter_spec,
    export_notifications,
    export_notifications_csv,
    get_counts,
    get_notifications_batch,
    get_page,
    get_recent,
    get_unread_count,
)
from notification_engine.domain.errors import InvalidCursorError, InvalidFilterError
from notification_engine.domain.query import FilterSpec, SortBy


def _walk(store, user_id, filters, limit):
    collected = []
    cursor = None
    while True:
        page = get_page(store, user_id=user_id, filters=filters, cursor=cursor, limit=limit)
        collected.extend(page.items)
        if not page.has_more:
            return collected
        cursor = page.next_cursor


@pytest.mark.parametrize("sort_by", list(SortBy))
def test_paging_through_all_pages_matches_export(store, make_notification, sort_by):
    types = ["alert", "billing", "info"]
    for index in range(23):
        make_notification(type=types[index % 3], read=index % 4 == 0)
    # Same timestamp for several rows exercises the id tie-breaker.
    for _ in range(4):
        make_notification(type="alert", created_at=BASE_TIME)
    make_notification(user_id="someone-else")
    filters = FilterSpec(sort_by=sort_by)

    paged = _walk(store, "u1", filters, limit=5)
    exported = export_notifications(store, user_id="u1", filters=filters)

    assert [n.id for n in paged] == [n.id for n in exported]
    assert len(exported) == 27
    assert len({n.id for n in paged}) == 27


def test_cursor_from_another_ordering_is_rejected(store, make_notification):
    for _ in range(3):
        make_notification()
    first = get_page(store, user_id="u1", filters=FilterSpec(sort_by=SortBy.NEWEST), limit=2)

    with pytest.raises(InvalidCursorError):
        get_page(
            store,
            user_id="u1",
            filters=FilterSpec(sort_by=SortBy.TYPE),
            cursor=first.next_cursor,
            limit=2,
        )


@pytest.mark.parametrize("limit", [0, 101])
def test_page_limit_outside_range_is_rejected(store, limit):
    with pytest.raises(InvalidFilterError):
        get_page(store, user_id="u1", limit=limit)


def test_empty_result_is_a_page_without_cursor(store):
    page = get_page(store, user_id="nobody")

    assert page.items == []
    assert page.next_cursor is None


def test_filters_combine_search_type_status_and_dates(store, make_notification):
    make_notification(type="alert", message="Disk FULL on db-1")
    make_notification(type="alert", message="disk full on db-2", read=True)
    make_notification(type="info", message="disk full on db-3")
    make_notification(type="alert", message="cpu hot")
    old = make_notification(
        type="alert", message="disk full long ago", created_at=BASE_TIME - timedelta(days=30)
    )
    filters = build_filter_spec(
        search="disk full",
        types=["alert"],
        status="unread",
        date_from=BASE_TIME,
    )

    items = export_notifications(store, user_id="u1", filters=filters)

    assert [n.message for n in items] == ["Disk FULL on db-1"]
    assert old.id not in {n.id for n in items}


def test_search_treats_wildcards_literally(store, make_notification):
    make_notification(message="100% done")
    make_notification(message="1000 done")

    items = export_notifications(store, user_id="u1", filters=FilterSpec(search="0%"))

    assert [n.message for n in items] == ["100% done"]


def test_unread_scenario_for_single_user(store, make_notification):
    for index in range(5):
        make_notification(type="alert" if index < 3 else "info")
    for _ in range(7):
        make_notification(type="info", read=True)

    filters = build_filter_spec(status="unread", types=["alert"], sort_by="newest")
    page = get_page(store, user_id="u1", filters=filters, limit=2)

    assert len(page.items) == 2
    assert page.next_cursor is not None
    assert all(n.type == "alert" and not n.read for n in page.items)

    second = get_page(
        store, user_id="u1", filters=filters, cursor=page.next_cursor, limit=2
    )
    assert len(second.items) == 1
    assert second.next_cursor is None

    counts = get_counts(store, user_id="u1")
    assert (counts.total, counts.unread, counts.read) == (12, 5, 7)
    assert get_unread_count(store, user_id="u1") == 5


def test_counts_match_unfiltered_export(store, make_notification):
    for index in range(9):
        make_notification(read=index % 2 == 0)

    counts = get_counts(store, user_id="u1")
    everything = export_notifications(store, user_id="u1")

    assert counts.total == len(everything)
    assert counts.unread == sum(1 for n in everything if not n.read)
    assert counts.total == counts.unread + counts.read


def test_recent_returns_newest_first(store, make_notification):
    created = [make_notification() for _ in range(4)]

    recent = get_recent(store, user_id="u1", limit=3)

    assert [n.id for n in recent] == [n.id for n in reversed(created)][:3]
    with pytest.raises(InvalidFilterError):
        get_recent(store, user_id="u1", limit=51)


def test_batch_fetch_only_returns_owned_rows(store, make_notification):
    mine = [make_notification() for _ in range(3)]
    theirs = make_notification(user_id="u2")

    items = get_notifications_batch(
        store, user_id="u1", ids=[mine[0].id, mine[2].id, theirs.id, mine[0].id]
    )

    assert [n.id for n in items] == [mine[2].id, mine[0].id]


def test_csv_export_has_header_and_rows(store, make_notification):
    make_notification(message='Say "hi"', link="https://example.com/n/1")
    make_notification(read=True)

    export = export_notifications_csv(store, user_id="u1", reference=BASE_TIME)

    lines = export.content.splitlines()
    assert lines[0] == "ID,Message,Type,Status,Created At,Updated At,Link"
    assert export.count == 2
    assert export.filename == "notifications-u1-2024-03-10.csv"
    assert ',Read,' in lines[1]
    assert '"Say ""hi"""' in lines[2]
    assert lines[2].endswith("https://example.com/n/1")
    assert export.content.endswith("\n")


def test_csv_export_without_rows_keeps_the_header(store):
    export = export_notifications_csv(store, user_id="nobody", reference=BASE_TIME)

    assert export.count == 0
    assert export.content == "ID,Message,Type,Status,Created At,Updated At,Link\n"


def test_date_range_includes_start_and_excludes_end(store, make_notification):
    start = BASE_TIME
    end = BASE_TIME + timedelta(hours=1)
    at_start = make_notification(message="at start", created_at=start)
    inside = make_notification(message="inside", created_at=start + timedelta(minutes=30))
    make_notification(message="at end", created_at=end)
    make_notification(message="before", created_at=start - timedelta(microseconds=1))

    items = export_notifications(
        store,
        user_id="u1",
        filters=build_filter_spec(date_from=start, date_to=end),
    )

    assert [n.id for n in items] == [inside.id, at_start.id]


def test_type_filtered_pages_walk_to_the_end(store, make_notification):
    n1 = make_notification(type="info")
    make_notification(type="billing", read=True)
    n3 = make_notification(type="info")
    filters = build_filter_spec(types=["info"])

    first = get_page(store, user_id="u1", filters=filters, limit=1)

    assert [n.id for n in first.items] == [n3.id]
    assert first.next_cursor is not None

    second = get_page(
        store, user_id="u1", filters=filters, cursor=first.next_cursor, limit=1
    )

    assert [n.id for n in second.items] == [n1.id]
    assert second.next_cursor is None
