from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.schemas import RadiationLevel
from models.records import RadiationRecord
from services.dashboard import (
    TableView,
    classify_level,
    classify_status,
    format_clock,
    format_fixed,
    paginate,
    search_records,
    snapshot,
    summarize,
    total_pages,
)
from services.parser import parse_feed
from services.state import DashboardState


def _records(count: int) -> list[RadiationRecord]:
    return [
        RadiationRecord(timestamp=f"{day:02d}/06/2024 12:00:00", cpm=day)
        for day in range(1, count + 1)
    ]


@pytest.mark.parametrize(
    ("usv", "expected"),
    [
        (1.5, RadiationLevel.high),
        (1.0, RadiationLevel.elevated),
        (0.7, RadiationLevel.elevated),
        (0.5, RadiationLevel.normal),
        (0.2, RadiationLevel.normal),
    ],
)
def test_classify_level_thresholds(usv: float, expected: RadiationLevel) -> None:
    assert classify_level(usv) is expected


def test_classify_status_uses_newest_record() -> None:
    records = [
        RadiationRecord(timestamp="newest", avg_usv=0.7),
        RadiationRecord(timestamp="older", avg_usv=1.5),
    ]

    assert classify_status(records) is RadiationLevel.elevated
    assert classify_status([]) is RadiationLevel.unknown


def test_search_is_case_insensitive_substring() -> None:
    records = [
        RadiationRecord(timestamp="01/06/2024 12:00:00"),
        RadiationRecord(timestamp="01/06/2023 12:00:00"),
        RadiationRecord(timestamp="Pending AM"),
    ]

    assert [r.timestamp for r in search_records(records, "2024")] == ["01/06/2024 12:00:00"]
    assert [r.timestamp for r in search_records(records, "pending am")] == ["Pending AM"]
    assert search_records(records, "") == records


def test_paginate_forty_five_records() -> None:
    records = _records(45)

    assert total_pages(45) == 3
    last = paginate(records, page=3)
    assert last.total_pages == 3
    assert len(last.items) == 5
    assert last.items[0].cpm == 41
    assert last.has_next is False
    assert last.has_previous is True

    first = paginate(records, page=1)
    assert len(first.items) == 20
    assert first.has_previous is False


def test_paginate_past_end_is_empty() -> None:
    page = paginate(_records(5), page=4)

    assert page.items == []
    assert page.total_pages == 1


def test_paginate_rejects_bad_page_size() -> None:
    with pytest.raises(ValueError):
        paginate(_records(1), page_size=0)


def test_table_view_resets_page_when_query_changes() -> None:
    records = _records(30)
    table = TableView()
    table.next_page(records)
    assert table.page == 2

    table.set_query("1")
    assert table.page == 1

    table.next_page(records)
    table.set_query("1")
    assert table.page == 2


def test_table_view_clamps_navigation() -> None:
    records = _records(45)
    table = TableView()

    table.previous_page()
    assert table.page == 1
    for _ in range(5):
        table.next_page(records)
    assert table.page == 3

    table.go_to(99, records)
    assert table.page == 3
    table.go_to(-2, records)
    assert table.page == 1

    table.next_page([])
    assert table.page == 1


def test_table_view_empty_messages() -> None:
    table = TableView()
    assert table.empty_message() == "No data available"

    table.set_query("1999")
    assert table.current(_records(3)).items == []
    assert table.empty_message() == "No matching records found"


def test_format_fixed() -> None:
    assert format_fixed(18.5, 2) == "18.50"
    assert format_fixed(None, 3) == "--"
    assert format_fixed(0.55, 3) == "0.550"


def test_format_clock() -> None:
    value = datetime(2024, 6, 1, 10, 1, 5, tzinfo=timezone.utc)

    assert format_clock(None) == "--:--:--"
    assert format_clock(value) == "10:01:05 UTC"
    assert format_clock(value, local=True) == value.astimezone().strftime("%H:%M:%S")


def test_end_to_end_feed_to_status() -> None:
    text = (
        "header\n"
        "01/06/2024 10:00:00,60,20,18.5,0.12,1000\n"
        "01/06/2024 10:01:00,60,22,19.0,0.55,1022\n"
    )
    state = DashboardState()
    fetched_at = datetime(2024, 6, 1, 10, 1, 5, tzinfo=timezone.utc)

    state.complete(state.begin_fetch(), parse_feed(text), fetched_at=fetched_at)

    assert list(state.store.records) == [
        RadiationRecord("01/06/2024 10:01:00", 60, 22, 19.0, 0.55, 1022),
        RadiationRecord("01/06/2024 10:00:00", 60, 20, 18.5, 0.12, 1000),
    ]
    summary = summarize(state)
    assert summary.status is RadiationLevel.elevated
    assert summary.current_cpm == 22
    assert summary.avg_usv == 0.55
    assert summary.latest_timestamp == "01/06/2024 10:01:00"
    assert summary.last_update == fetched_at
    assert summary.record_count == 2


def test_snapshot_of_empty_state() -> None:
    state = DashboardState()

    frame = snapshot(state)

    assert frame.loading is True
    assert frame.summary.status is RadiationLevel.unknown
    assert frame.summary.current_cpm is None
    assert frame.chart == []
