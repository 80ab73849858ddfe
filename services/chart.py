"""Projection of the newest records into a chronological chart series."""

from __future__ import annotations

from datetime import datetime
from typing import List, Sequence

from app.schemas import ChartPoint
from models.records import RadiationRecord

DEFAULT_CHART_POINTS = 20


def parse_feed_timestamp(timestamp: str) -> datetime:
    """Decompose ``DD/MM/YYYY HH:mm:ss`` field by field.

    Day-first slash dates are ambiguous to generic parsers, so the parts are
    split out by position instead.
    """
    date_part, time_part = timestamp.strip().split(" ", 1)
    day, month, year = date_part.split("/")
    hours, minutes, seconds = time_part.strip().split(":")
    return datetime(
        int(year), int(month), int(day), int(hours), int(minutes), int(seconds)
    )


def format_axis_time(timestamp: str) -> str:
    """Return a 24-hour ``HH:MM`` label for the x axis."""
    try:
        return parse_feed_timestamp(timestamp).strftime("%H:%M")
    except ValueError:
        parts = timestamp.split(" ")
        if len(parts) > 1 and parts[1]:
            return parts[1][:5]
        return timestamp


def format_series_value(series: str, value: float) -> str:
    """Tooltip text for a point: dose rate to 3 places, counts to 1."""
    if series == "avg_usv":
        return f"μSv/h: {value:.3f}"
    return f"{series.upper()}: {value:.1f}"


def project_chart(
    records: Sequence[RadiationRecord],
    points: int = DEFAULT_CHART_POINTS,
) -> List[ChartPoint]:
    """Take the ``points`` newest records and order them oldest to newest."""
    window = list(records[:points])
    window.reverse()
    return [
        ChartPoint(
            time=format_axis_time(record.timestamp),
            cpm=record.cpm,
            avg_cpm=record.avg_cpm,
            avg_usv=record.avg_usv,
            timestamp=record.timestamp,
        )
        for record in window
    ]
