"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from app.schemas import DashboardSnapshot, RelayError
from services.dashboard import snapshot
from services.feed import NO_CACHE_HEADERS, FeedError, UpstreamFeed, build_default_feed
from services.state import DashboardState
from settings import get_settings

RELAY_ERROR_MESSAGE = "Failed to fetch radiation data"

router = APIRouter()


def get_feed() -> UpstreamFeed:
    return build_default_feed()


def get_state(request: Request) -> DashboardState:
    return request.app.state.dashboard


@router.get(
    "/api/radiation-data",
    summary="Relay the upstream CSV export with caching disabled.",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}},
        500: {"model": RelayError},
    },
)
async def radiation_data(feed: UpstreamFeed = Depends(get_feed)) -> Response:
    try:
        body = await feed.fetch_csv()
    except FeedError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=RelayError(error=RELAY_ERROR_MESSAGE).model_dump(),
            headers=NO_CACHE_HEADERS,
        )
    return Response(content=body, media_type="text/csv", headers=NO_CACHE_HEADERS)


@router.get(
    "/api/summary",
    response_model=DashboardSnapshot,
    summary="Current status, headline figures and chart series.",
)
async def dashboard_summary(
    state: DashboardState = Depends(get_state),
) -> DashboardSnapshot:
    return snapshot(state, chart_points=get_settings().chart_points)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /ui for the radiation dashboard."}
