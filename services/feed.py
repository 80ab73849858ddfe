"""Retrieval of the raw CSV export from the upstream spreadsheet."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

import httpx

from settings import get_settings

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class FeedError(Exception):
    """Raised when the feed cannot be retrieved."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamFeed:
    """Fetches the spreadsheet export with a browser-like request and no caching."""

    def __init__(
        self,
        url: str,
        user_agent: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout
        self._transport = transport

    def _request_headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Cache-Control": NO_CACHE_HEADERS["Cache-Control"],
            "Pragma": NO_CACHE_HEADERS["Pragma"],
        }

    async def fetch_csv(self) -> str:
        """Return the CSV body, raising :class:`FeedError` on any failure."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(self.url, headers=self._request_headers())
        except Exception as exc:
            logger.error(
                "Upstream feed request failed",
                extra={"url": self.url, "reason": exc.__class__.__name__},
            )
            raise FeedError(f"Failed to fetch data: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Upstream feed returned an error status",
                extra={"url": self.url, "status_code": response.status_code},
            )
            raise FeedError(
                f"Failed to fetch data: {response.status_code}",
                status_code=response.status_code,
            )
        return response.text


@lru_cache
def build_default_feed() -> UpstreamFeed:
    """Factory that wires the upstream feed from settings."""
    settings = get_settings()
    return UpstreamFeed(
        url=settings.feed_url,
        user_agent=settings.feed_user_agent,
        timeout=settings.feed_timeout,
    )
