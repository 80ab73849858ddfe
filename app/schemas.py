"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class RadiationLevel(str, Enum):
    """Dose-rate classification of a reading."""

    unknown = "unknown"
    normal = "normal"
    elevated = "elevated"
    high = "high"


class RelayError(BaseModel):
    """Body returned by the relay when the upstream feed is unreachable."""

    error: str


class StatusSummary(BaseModel):
    """Headline figures taken from the newest record."""

    status: RadiationLevel
    current_cpm: Optional[int] = None
    avg_cpm: Optional[float] = None
    avg_usv: Optional[float] = Field(
        default=None, description="Smoothed dose rate in microsieverts per hour."
    )
    latest_timestamp: Optional[str] = None
    last_update: Optional[datetime] = Field(
        default=None, description="When the dashboard last applied a successful fetch."
    )
    record_count: int = Field(0, ge=0)


class ChartPoint(BaseModel):
    """One chronologically ordered point of the trend chart."""

    time: str
    cpm: int
    avg_cpm: float
    avg_usv: float
    timestamp: str


class DashboardSnapshot(BaseModel):
    """Everything a renderer needs for one frame of the dashboard."""

    summary: StatusSummary
    chart: List[ChartPoint] = Field(default_factory=list)
    loading: bool = False
    refreshing: bool = False
    error: Optional[str] = None
