from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import RelayClient
from cli.config import CLIConfig, load_config
from cli.render import echo_error, render_chart, render_status, render_table
from services.chart import DEFAULT_CHART_POINTS, project_chart
from services.dashboard import DEFAULT_PAGE_SIZE, TableView, summarize
from services.feed import FeedError
from services.parser import parse_feed
from services.state import DashboardState


@dataclass
class CLIState:
    config: CLIConfig
    client: RelayClient


app = typer.Typer(
    help="Terminal view of the radiation monitor, read through the server relay.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _refresh(dashboard: DashboardState, client: RelayClient) -> bool:
    sequence = dashboard.begin_fetch()
    try:
        text = client.fetch_csv()
    except FeedError as exc:
        return dashboard.fail(sequence, str(exc))
    return dashboard.complete(sequence, parse_feed(text))


def _load_once(state: CLIState) -> DashboardState:
    dashboard = DashboardState()
    _refresh(dashboard, state.client)
    if dashboard.error:
        echo_error(dashboard.error)
        raise typer.Exit(code=1)
    return dashboard


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Monitor server base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for the relay before giving up.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, request_timeout=timeout)
    client = RelayClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show the current radiation status and headline figures."""
    dashboard = _load_once(_get_state(ctx))
    render_status(summarize(dashboard))


@app.command("table")
def table_command(
    ctx: typer.Context,
    search: str = typer.Option("", "--search", "-s", help="Case-insensitive timestamp filter."),
    page: int = typer.Option(1, "--page", "-p", min=1, help="1-based page number."),
    page_size: int = typer.Option(DEFAULT_PAGE_SIZE, "--page-size", min=1, help="Rows per page."),
) -> None:
    """List recorded readings, newest first."""
    dashboard = _load_once(_get_state(ctx))
    records = dashboard.store.records
    table = TableView(page_size=page_size)
    table.set_query(search)
    table.go_to(page, records)
    render_table(table.current(records), table)


@app.command("chart")
def chart_command(
    ctx: typer.Context,
    points: int = typer.Option(DEFAULT_CHART_POINTS, "--points", "-n", min=1, help="How many recent readings to plot."),
) -> None:
    """Print the recent trend in chronological order."""
    dashboard = _load_once(_get_state(ctx))
    render_chart(project_chart(dashboard.store.records, points))


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between refreshes (defaults to CLI_REFRESH_INTERVAL env or 30).",
    ),
    iterations: Optional[int] = typer.Option(
        None,
        "--iterations",
        min=1,
        help="Stop after this many refreshes; runs until interrupted by default.",
    ),
) -> None:
    """Refresh the status on a timer, keeping the last good data on errors."""
    state = _get_state(ctx)
    period = interval if interval is not None else state.config.refresh_interval
    dashboard = DashboardState()
    count = 0
    try:
        while True:
            _refresh(dashboard, state.client)
            count += 1
            if dashboard.error:
                echo_error(dashboard.error)
            render_status(summarize(dashboard))
            if iterations is not None and count >= iterations:
                return
            typer.echo()
            time.sleep(period)
    except KeyboardInterrupt:
        typer.echo("Stopped.")
