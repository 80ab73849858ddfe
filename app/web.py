from __future__ import annotations

from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.api import get_feed, get_state
from services.chart import project_chart
from services.dashboard import TableView, classify_level, format_clock, format_fixed, summarize
from services.feed import UpstreamFeed
from services.poller import refresh_state
from services.state import DashboardState
from settings import get_settings


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
templates.env.filters["fixed"] = format_fixed
templates.env.filters["clock"] = format_clock
templates.env.globals["level_of"] = classify_level


def _ui_url(request: Request, query: str = "", page: int = 1) -> str:
    url = str(request.url_for("ui_index"))
    params = {}
    if query:
        params["q"] = query
    if page > 1:
        params["page"] = page
    return f"{url}?{urlencode(params)}" if params else url


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    q: str = Query(""),
    page: int = Query(1),
    state: DashboardState = Depends(get_state),
) -> HTMLResponse:
    settings = get_settings()
    if state.loading:
        return templates.TemplateResponse(request, "ui/loading.html", {})

    records = state.store.records
    table = TableView(page_size=settings.page_size)
    table.set_query(q)
    table.go_to(page, records)
    current = table.current(records)

    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "summary": summarize(state),
            "error": state.error,
            "refreshing": state.refreshing,
            "chart": [point.model_dump() for point in project_chart(records, settings.chart_points)],
            "table": table,
            "page": current,
            "prev_url": _ui_url(request, table.query, current.number - 1),
            "next_url": _ui_url(request, table.query, current.number + 1),
            "refresh_seconds": int(settings.refresh_interval),
        },
    )


@router.post("/ui/refresh", name="ui_refresh")
async def ui_refresh(
    request: Request,
    q: str = Query(""),
    state: DashboardState = Depends(get_state),
    feed: UpstreamFeed = Depends(get_feed),
) -> RedirectResponse:
    await refresh_state(state, feed, manual=True)
    return RedirectResponse(_ui_url(request, q), status_code=status.HTTP_303_SEE_OTHER)
