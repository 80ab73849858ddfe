"""Lossy-but-total parsing of the radiation feed CSV export."""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, Optional

from models.records import RadiationRecord

logger = logging.getLogger(__name__)

FEED_COLUMNS = ("timestamp", "seconds", "cpm", "avg_cpm", "avg_uSv", "total_events")

_INT_PREFIX = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_int(raw: Optional[str]) -> int:
    """Return the leading integer of ``raw``, or ``0`` when there is none."""
    if raw is None:
        return 0
    match = _INT_PREFIX.match(raw.strip())
    if match is None:
        return 0
    return int(match.group())


def parse_float(raw: Optional[str]) -> float:
    """Return the leading decimal number of ``raw``, or ``0.0`` when there is none.

    Non-finite results such as ``"1e999"`` also become ``0.0``.
    """
    if raw is None:
        return 0.0
    match = _FLOAT_PREFIX.match(raw.strip())
    if match is None:
        return 0.0
    value = float(match.group())
    return value if math.isfinite(value) else 0.0


def parse_line(line: str) -> RadiationRecord:
    """Split one feed line positionally into a record.

    Missing trailing fields resolve to zero and extra fields are ignored.
    Quoting is not supported; the export never embeds commas.
    """
    fields: list[Optional[str]] = list(line.split(","))
    fields.extend([None] * (len(FEED_COLUMNS) - len(fields)))
    timestamp, seconds, cpm, avg_cpm, avg_usv, total_events = fields[: len(FEED_COLUMNS)]
    return RadiationRecord(
        timestamp=(timestamp or "").strip(),
        elapsed_seconds=parse_int(seconds),
        cpm=parse_int(cpm),
        avg_cpm=parse_float(avg_cpm),
        avg_usv=parse_float(avg_usv),
        total_events=parse_int(total_events),
    )


def parse_lines(lines: Iterable[str]) -> list[RadiationRecord]:
    """Parse data lines, dropping any whose timestamp is blank."""
    records: list[RadiationRecord] = []
    for line in lines:
        record = parse_line(line)
        if not record.timestamp:
            continue
        records.append(record)
    return records


def parse_feed(text: str) -> list[RadiationRecord]:
    """Parse a whole CSV export in source order (oldest first).

    The first line is treated as a header and skipped without inspection.
    """
    lines = text.strip().split("\n")
    data_lines = lines[1:]
    records = parse_lines(data_lines)
    dropped = len(data_lines) - len(records)
    if dropped:
        logger.debug(
            "Dropped feed rows without a timestamp",
            extra={"row_count": dropped, "reason": "missing timestamp"},
        )
    return records
