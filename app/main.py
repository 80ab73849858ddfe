from __future__ import annotations
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api import router
from app.web import router as web_router
from logging_config import configure_logging
from services.feed import build_default_feed
from services.poller import FeedPoller
from services.state import DashboardState
from settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    state = DashboardState()
    poller = FeedPoller(
        state=state,
        source=build_default_feed(),
        interval=get_settings().refresh_interval,
    )
    app.state.dashboard = state
    app.state.poller = poller
    poller.start()
    try:
        yield
    finally:
        await poller.stop()
        del app.state.poller
        del app.state.dashboard


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Radiation Monitor",
        description="Live dashboard over a spreadsheet-hosted radiation sensor log.",
        version="0.1.0",
        lifespan=lifespan,
    )
    static_dir = Path(__file__).resolve().parent.parent / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
