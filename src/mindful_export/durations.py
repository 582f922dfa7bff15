"""Turn raw session timestamps into minute/second durations."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from .config import ExtractorSettings, TimestampPolicy
from .errors import FormatError, RangeError
from .models import RawMindfulRecord, ResolvedRecord

logger = logging.getLogger(__name__)

HEALTH_DATETIME_FMT = "%Y-%m-%d %H:%M:%S %z"

# strptime's %z also takes "Z" and "+01:00"; exports only ever use +HHMM.
_TIMESTAMP_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} [+-]\d{4}", re.ASCII
)

# Bloom stores durations as signed 32-bit integers.
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def parse_health_timestamp(value: str) -> datetime:
    """Parse ``2024-11-11 17:57:08 -0500`` into an aware UTC datetime."""
    if not _TIMESTAMP_PATTERN.fullmatch(value):
        raise FormatError(value)
    try:
        parsed = datetime.strptime(value, HEALTH_DATETIME_FMT)
    except ValueError as exc:
        raise FormatError(value) from exc
    return parsed.astimezone(timezone.utc)


def split_duration(total_seconds: int) -> tuple[int, int]:
    """Split into whole minutes and leftover seconds, truncating toward zero.

    The remainder takes the sign of ``total_seconds``: -90 gives (-1, -30).
    """
    minutes, seconds = divmod(abs(total_seconds), 60)
    if total_seconds < 0:
        return -minutes, -seconds
    return minutes, seconds


def resolve_record(raw: RawMindfulRecord) -> ResolvedRecord:
    occurred_at = parse_health_timestamp(raw.start)
    ended_at = parse_health_timestamp(raw.end)
    total_seconds = int((ended_at - occurred_at).total_seconds())
    if not _INT32_MIN <= total_seconds <= _INT32_MAX:
        raise RangeError(
            f"Session from {raw.app!r} starting {raw.start} lasts {total_seconds} seconds, "
            "which does not fit a 32-bit duration"
        )
    if total_seconds < 0:
        logger.debug("Session from %s at %s ends before it starts.", raw.app, raw.start)

    minutes, seconds = split_duration(total_seconds)
    return ResolvedRecord(
        app_name=raw.app,
        occurred_at=occurred_at,
        meditation_minutes=minutes,
        dropped_seconds=seconds,
    )


def resolve_records(
    raws: Iterable[RawMindfulRecord], settings: Optional[ExtractorSettings] = None
) -> list[ResolvedRecord]:
    """Resolve every record, applying the configured bad-timestamp policy."""
    settings = settings or ExtractorSettings()
    resolved: list[ResolvedRecord] = []
    for raw in raws:
        try:
            resolved.append(resolve_record(raw))
        except FormatError as exc:
            if settings.timestamp_policy is TimestampPolicy.ABORT:
                raise
            logger.warning("Skipping session from %s: %s", raw.app or "(unknown)", exc)
    return resolved
