from __future__ import annotations

from typing import Optional

import httpx

from cli.config import CLIConfig
from services.feed import FeedError

RELAY_PATH = "/api/radiation-data"


class RelayClient:
    """Fetches the raw feed through the server's relay endpoint."""

    def __init__(
        self,
        config: CLIConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=config.request_timeout,
            transport=transport,
            headers={"Cache-Control": "no-cache"},
        )

    def close(self) -> None:
        self._client.close()

    def fetch_csv(self) -> str:
        """Return the relayed CSV text, raising :class:`FeedError` on any failure."""
        try:
            response = self._client.get(RELAY_PATH)
        except httpx.HTTPError as exc:
            raise FeedError(f"Failed to fetch data: {exc}") from exc
        if not response.is_success:
            raise FeedError(
                f"Failed to fetch data: {self._describe(response)}",
                status_code=response.status_code,
            )
        return response.text

    @staticmethod
    def _describe(response: httpx.Response) -> str:
        detail: str | None = None
        try:
            payload = response.json()
        except ValueError:
            detail = response.text.strip() or None
        else:
            if isinstance(payload, dict):
                detail = payload.get("error") or payload.get("detail")
        if detail:
            return f"{response.status_code} ({detail})"
        return str(response.status_code)
