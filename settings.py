from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


DEFAULT_FEED_URL = (
    "https://docs.google.com/spreadsheets/d/"
    "139PrOyrT4Nuwv_pLWpRdXvaS-J5BIRywC__49I8KCxE/export?format=csv"
)
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

_FEED_URL_ENV = "RADIATION_FEED_URL"
_USER_AGENT_ENV = "RADIATION_FEED_USER_AGENT"
_FEED_TIMEOUT_ENV = "RADIATION_FEED_TIMEOUT"
_REFRESH_INTERVAL_ENV = "REFRESH_INTERVAL_SECONDS"
_PAGE_SIZE_ENV = "DASHBOARD_PAGE_SIZE"
_CHART_POINTS_ENV = "DASHBOARD_CHART_POINTS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    feed_url: str
    feed_user_agent: str
    feed_timeout: float
    refresh_interval: float
    page_size: int
    chart_points: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        feed_url=_read_str_env(_FEED_URL_ENV, DEFAULT_FEED_URL),
        feed_user_agent=_read_str_env(_USER_AGENT_ENV, DEFAULT_USER_AGENT),
        feed_timeout=_read_positive_float(_FEED_TIMEOUT_ENV, 30.0),
        refresh_interval=_read_positive_float(_REFRESH_INTERVAL_ENV, 30.0),
        page_size=_read_positive_int(_PAGE_SIZE_ENV, 20),
        chart_points=_read_positive_int(_CHART_POINTS_ENV, 20),
        log_level=_read_log_level("INFO"),
    )
