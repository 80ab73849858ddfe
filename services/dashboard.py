"""Derived views over the record store: status, search and pagination."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from app.schemas import DashboardSnapshot, RadiationLevel, StatusSummary
from models.records import RadiationRecord
from services.chart import project_chart
from services.state import DashboardState

HIGH_USV_THRESHOLD = 1.0
ELEVATED_USV_THRESHOLD = 0.5
DEFAULT_PAGE_SIZE = 20


def classify_level(avg_usv: float) -> RadiationLevel:
    if avg_usv > HIGH_USV_THRESHOLD:
        return RadiationLevel.high
    if avg_usv > ELEVATED_USV_THRESHOLD:
        return RadiationLevel.elevated
    return RadiationLevel.normal


def classify_status(records: Sequence[RadiationRecord]) -> RadiationLevel:
    """Classify the newest record (index 0); ``unknown`` when there are none."""
    if not records:
        return RadiationLevel.unknown
    return classify_level(records[0].avg_usv)


def search_records(records: Sequence[RadiationRecord], query: str) -> List[RadiationRecord]:
    """Case-insensitive substring match against each record's timestamp."""
    needle = (query or "").lower()
    if not needle:
        return list(records)
    return [record for record in records if needle in record.timestamp.lower()]


def total_pages(count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    return math.ceil(count / page_size)


@dataclass
class Page:
    """A single page of table rows."""

    number: int
    page_size: int
    total_count: int
    items: List[RadiationRecord] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def paginate(
    records: Sequence[RadiationRecord],
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Page:
    """Slice out 1-based ``page``; a page past the end is empty."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    number = max(1, page)
    start = (number - 1) * page_size
    return Page(
        number=number,
        page_size=page_size,
        total_count=len(records),
        items=list(records[start : start + page_size]),
    )


class TableView:
    """Search box and pager state for the record table.

    Changing the query sends the pager back to page 1 so a narrower result
    set never leaves it stranded past the last page.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.page_size = page_size
        self.query = ""
        self.page = 1

    def set_query(self, query: Optional[str]) -> None:
        query = query or ""
        if query != self.query:
            self.query = query
            self.page = 1

    def filtered(self, records: Sequence[RadiationRecord]) -> List[RadiationRecord]:
        return search_records(records, self.query)

    def current(self, records: Sequence[RadiationRecord]) -> Page:
        return paginate(self.filtered(records), self.page, self.page_size)

    def next_page(self, records: Sequence[RadiationRecord]) -> None:
        last = total_pages(len(self.filtered(records)), self.page_size)
        self.page = min(last, self.page + 1) if last else 1

    def previous_page(self) -> None:
        self.page = max(1, self.page - 1)

    def go_to(self, page: int, records: Sequence[RadiationRecord]) -> None:
        last = total_pages(len(self.filtered(records)), self.page_size)
        self.page = min(max(1, page), max(1, last))

    def empty_message(self) -> str:
        return "No matching records found" if self.query else "No data available"


def format_fixed(value: Optional[float], digits: int) -> str:
    """Render like the dashboard cards do, with ``--`` for a missing value."""
    if value is None:
        return "--"
    return f"{value:.{digits}f}"


def format_clock(value: Optional[datetime], local: bool = False) -> str:
    """Time-of-day for the "last update" card; UTC and labelled unless ``local``."""
    if value is None:
        return "--:--:--"
    if local:
        return value.astimezone().strftime("%H:%M:%S")
    return value.astimezone(timezone.utc).strftime("%H:%M:%S UTC")


def summarize(state: DashboardState) -> StatusSummary:
    records = state.store.records
    latest = state.store.latest
    return StatusSummary(
        status=classify_status(records),
        current_cpm=latest.cpm if latest else None,
        avg_cpm=latest.avg_cpm if latest else None,
        avg_usv=latest.avg_usv if latest else None,
        latest_timestamp=latest.timestamp if latest else None,
        last_update=state.last_update,
        record_count=len(records),
    )


def snapshot(state: DashboardState, chart_points: int = 20) -> DashboardSnapshot:
    return DashboardSnapshot(
        summary=summarize(state),
        chart=project_chart(state.store.records, chart_points),
        loading=state.loading,
        refreshing=state.refreshing,
        error=state.error,
    )
