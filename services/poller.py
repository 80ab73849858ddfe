"""Periodic and on-demand refresh of the dashboard state."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from services.feed import FeedError
from services.parser import parse_feed
from services.state import DashboardState

logger = logging.getLogger(__name__)


class CsvSource(Protocol):
    async def fetch_csv(self) -> str: ...


async def refresh_state(
    state: DashboardState,
    source: CsvSource,
    manual: bool = False,
) -> bool:
    """Run one fetch-and-parse cycle; returns whether the result was applied."""
    sequence = state.begin_fetch(manual=manual)
    logger.debug("Refreshing feed", extra={"sequence": sequence, "manual": manual})
    try:
        text = await source.fetch_csv()
    except FeedError as exc:
        return state.fail(sequence, str(exc))
    except Exception as exc:  # pragma: no cover - keeps the poller alive
        logger.exception("Unexpected error while refreshing feed", extra={"sequence": sequence})
        return state.fail(sequence, str(exc))
    records = parse_feed(text)
    applied = state.complete(sequence, records)
    if applied:
        logger.info(
            "Applied feed refresh",
            extra={"sequence": sequence, "row_count": len(records), "manual": manual},
        )
    return applied


class FeedPoller:
    """Scheduled refresh: once on start, then every ``interval`` seconds."""

    JOB_ID = "refresh_feed"

    def __init__(
        self,
        state: DashboardState,
        source: CsvSource,
        interval: float = 30.0,
    ) -> None:
        self.state = state
        self.source = source
        self.interval = interval
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Start the scheduler on the running event loop."""
        if self.running:
            return
        scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop())
        scheduler.add_job(
            func=refresh_state,
            args=(self.state, self.source),
            trigger=IntervalTrigger(seconds=self.interval),
            next_run_time=datetime.now(timezone.utc),
            id=self.JOB_ID,
            name="Refresh radiation feed",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Feed poller started", extra={"interval": self.interval})

    async def stop(self) -> None:
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is None:
            return
        # Pending fetches are cancelled rather than awaited.
        scheduler.shutdown(wait=False)
        await asyncio.sleep(0)
        logger.info("Feed poller stopped")
