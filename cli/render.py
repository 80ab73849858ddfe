from __future__ import annotations

from typing import Any, Iterable, Sequence

import typer

from app.schemas import ChartPoint, RadiationLevel, StatusSummary
from services.chart import format_series_value
from services.dashboard import Page, TableView, classify_level, format_clock, format_fixed

_LEVEL_COLORS = {
    RadiationLevel.unknown: typer.colors.WHITE,
    RadiationLevel.normal: typer.colors.GREEN,
    RadiationLevel.elevated: typer.colors.YELLOW,
    RadiationLevel.high: typer.colors.RED,
}

_TABLE_HEADER = (
    f"{'Timestamp':<20} {'Seconds':>8} {'CPM':>6} {'Avg CPM':>9} "
    f"{'μSv/h':>8} {'Total Events':>13}  Status"
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def echo_error(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)


def render_status(summary: StatusSummary) -> None:
    echo_heading("Radiation Status")
    typer.secho(
        f"status: {summary.status.value.upper()}",
        fg=_LEVEL_COLORS[summary.status],
        bold=True,
    )
    current_cpm = summary.current_cpm if summary.current_cpm is not None else "--"
    last_update = format_clock(summary.last_update, local=True)
    echo_key_values(
        [
            ("current_cpm", current_cpm),
            ("avg_cpm", format_fixed(summary.avg_cpm, 2)),
            ("avg_uSv_per_hour", format_fixed(summary.avg_usv, 3)),
            ("latest_reading", summary.latest_timestamp or "No data"),
            ("last_update", last_update),
            ("records", summary.record_count),
        ]
    )


def render_table(page: Page, table: TableView) -> None:
    echo_heading(f"Radiation Data Log ({page.total_count} records)")
    typer.echo(_TABLE_HEADER)
    if not page.items:
        typer.echo(table.empty_message())
    for row in page.items:
        level = classify_level(row.avg_usv)
        line = (
            f"{row.timestamp:<20} {row.elapsed_seconds:>8} {row.cpm:>6} "
            f"{format_fixed(row.avg_cpm, 2):>9} {format_fixed(row.avg_usv, 3):>8} "
            f"{row.total_events:>13}  "
        )
        typer.echo(line, nl=False)
        typer.secho(level.value.capitalize(), fg=_LEVEL_COLORS[level])
    if page.total_pages > 1:
        typer.echo(f"Page {page.number} of {page.total_pages}")


def render_chart(points: Sequence[ChartPoint]) -> None:
    echo_heading("Radiation Levels Over Time")
    if not points:
        typer.echo("No data available")
        return
    for point in points:
        values = "  ".join(
            format_series_value(series, getattr(point, series))
            for series in ("cpm", "avg_cpm", "avg_usv")
        )
        typer.echo(f"Time: {point.time}  {values}")
