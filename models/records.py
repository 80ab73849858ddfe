"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RadiationRecord:
    """A single observation row from the radiation feed.

    ``timestamp`` keeps the feed's ``DD/MM/YYYY HH:mm:ss`` text verbatim; it
    is only decomposed when an axis label is needed.
    """

    timestamp: str
    elapsed_seconds: int = 0
    cpm: int = 0
    avg_cpm: float = 0.0
    avg_usv: float = 0.0
    total_events: int = 0
