"""In-memory record store and the dashboard view-model around it."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from models.records import RadiationRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """Holds the latest parsed feed, newest record first.

    Every successful fetch replaces the contents wholesale.
    """

    def __init__(self) -> None:
        self._records: tuple[RadiationRecord, ...] = ()
        self.last_update: Optional[datetime] = None

    @property
    def records(self) -> Sequence[RadiationRecord]:
        return self._records

    @property
    def latest(self) -> Optional[RadiationRecord]:
        return self._records[0] if self._records else None

    def __len__(self) -> int:
        return len(self._records)

    def replace(
        self,
        records_oldest_first: Iterable[RadiationRecord],
        updated_at: Optional[datetime] = None,
    ) -> None:
        """Swap in a new feed given in source order; the store keeps it reversed."""
        self._records = tuple(reversed(list(records_oldest_first)))
        self.last_update = updated_at or datetime.now(timezone.utc)


class DashboardState:
    """View-model shared by the poller, the manual refresh action and the renderers.

    Each fetch is tagged with a sequence number from :meth:`begin_fetch`. A
    completion only touches the store or the error banner when its sequence is
    newer than the last one applied, so an out-of-order response is discarded.
    """

    def __init__(self, store: Optional[RecordStore] = None) -> None:
        self.store = store if store is not None else RecordStore()
        self.loading = True
        self.error: Optional[str] = None
        self._issued = 0
        self._applied = 0
        self._manual_in_flight: set[int] = set()

    @property
    def refreshing(self) -> bool:
        return bool(self._manual_in_flight)

    @property
    def last_update(self) -> Optional[datetime]:
        return self.store.last_update

    def begin_fetch(self, manual: bool = False) -> int:
        self._issued += 1
        sequence = self._issued
        if manual:
            self._manual_in_flight.add(sequence)
        return sequence

    def _finish(self, sequence: int) -> bool:
        self.loading = False
        self._manual_in_flight.discard(sequence)
        if sequence <= self._applied:
            logger.info(
                "Discarding stale feed completion",
                extra={"sequence": sequence, "reason": f"already applied {self._applied}"},
            )
            return False
        self._applied = sequence
        return True

    def complete(
        self,
        sequence: int,
        records_oldest_first: Iterable[RadiationRecord],
        fetched_at: Optional[datetime] = None,
    ) -> bool:
        """Apply a successful fetch; returns ``False`` when it was stale."""
        if not self._finish(sequence):
            return False
        self.store.replace(records_oldest_first, updated_at=fetched_at)
        self.error = None
        return True

    def fail(self, sequence: int, message: str) -> bool:
        """Record a failed fetch, keeping the last good records."""
        if not self._finish(sequence):
            return False
        self.error = message or "Unknown error occurred"
        return True
