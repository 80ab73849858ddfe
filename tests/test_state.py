from __future__ import annotations

from datetime import datetime, timezone

from models.records import RadiationRecord
from services.state import DashboardState, RecordStore


def _record(timestamp: str, usv: float = 0.1) -> RadiationRecord:
    return RadiationRecord(timestamp=timestamp, cpm=10, avg_cpm=10.0, avg_usv=usv)


def test_store_starts_empty() -> None:
    store = RecordStore()

    assert len(store) == 0
    assert store.latest is None
    assert store.last_update is None


def test_store_replace_reverses_source_order() -> None:
    store = RecordStore()
    updated_at = datetime(2024, 6, 1, tzinfo=timezone.utc)

    store.replace([_record("a"), _record("b"), _record("c")], updated_at=updated_at)

    assert [record.timestamp for record in store.records] == ["c", "b", "a"]
    assert store.latest.timestamp == "c"
    assert store.last_update == updated_at

    store.replace([_record("d")])
    assert [record.timestamp for record in store.records] == ["d"]


def test_complete_clears_loading_and_error() -> None:
    state = DashboardState()
    assert state.loading is True

    failed = state.begin_fetch()
    state.fail(failed, "Failed to fetch data: 500")
    assert state.loading is False
    assert state.error == "Failed to fetch data: 500"

    sequence = state.begin_fetch()
    assert state.complete(sequence, [_record("a")]) is True
    assert state.error is None
    assert state.last_update is not None


def test_failure_keeps_previous_records() -> None:
    state = DashboardState()
    state.complete(state.begin_fetch(), [_record("a"), _record("b")])

    state.fail(state.begin_fetch(), "boom")

    assert [record.timestamp for record in state.store.records] == ["b", "a"]
    assert state.error == "boom"


def test_stale_completion_is_discarded() -> None:
    state = DashboardState()
    older = state.begin_fetch()
    newer = state.begin_fetch(manual=True)

    assert state.complete(newer, [_record("new")]) is True
    assert state.complete(older, [_record("old")]) is False

    assert state.store.latest.timestamp == "new"
    assert state.refreshing is False


def test_stale_failure_does_not_raise_banner() -> None:
    state = DashboardState()
    older = state.begin_fetch()
    newer = state.begin_fetch()
    state.complete(newer, [_record("new")])

    assert state.fail(older, "late error") is False
    assert state.error is None


def test_refreshing_tracks_manual_fetches_only() -> None:
    state = DashboardState()
    timer = state.begin_fetch()
    assert state.refreshing is False

    manual = state.begin_fetch(manual=True)
    assert state.refreshing is True

    state.complete(timer, [])
    assert state.refreshing is True
    state.fail(manual, "boom")
    assert state.refreshing is False
