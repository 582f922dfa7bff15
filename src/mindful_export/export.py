"""CSV serialization of resolved sessions in Bloom's import layout."""

from __future__ import annotations

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union

from .config import ExtractorSettings
from .errors import OutputWriteError, SerializationError
from .models import ResolvedRecord

logger = logging.getLogger(__name__)

CSV_HEADER = ("App Name", "Start Time", "Duration", "Dropped Seconds")

Destination = Union[str, Path, TextIO]


def format_start_time(value: datetime) -> str:
    """RFC 3339 in UTC with a ``Z`` suffix, e.g. ``2024-01-01T08:00:00Z``."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_start_time(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)


def _row(record: ResolvedRecord) -> tuple[str, str, int, int]:
    return (
        record.app_name,
        format_start_time(record.occurred_at),
        record.meditation_minutes,
        record.dropped_seconds,
    )


def _write_rows(
    handle: TextIO, records: Iterable[ResolvedRecord], skip_zero_minutes: bool
) -> int:
    writer = csv.writer(handle)
    writer.writerow(CSV_HEADER)
    written = 0
    for record in records:
        if skip_zero_minutes and record.meditation_minutes == 0:
            continue
        writer.writerow(_row(record))
        written += 1
    return written


def write_csv(
    records: Iterable[ResolvedRecord],
    destination: Destination,
    settings: Optional[ExtractorSettings] = None,
) -> int:
    """Write records to a path or open text stream; return the number of data rows.

    Sessions shorter than a minute are left out unless the settings keep them.
    """
    settings = settings or ExtractorSettings()
    try:
        if isinstance(destination, (str, Path)):
            with open(destination, "w", newline="", encoding="utf-8") as handle:
                written = _write_rows(handle, records, settings.skip_zero_minutes)
        else:
            written = _write_rows(destination, records, settings.skip_zero_minutes)
            destination.flush()
    except csv.Error as exc:
        raise SerializationError(f"Could not encode a CSV row: {exc}") from exc
    except OSError as exc:
        raise OutputWriteError(f"Could not write {describe_destination(destination)}: {exc}") from exc
    logger.info("Wrote %d rows to %s", written, describe_destination(destination))
    return written


def read_csv(source: Union[str, Path, TextIO]) -> list[ResolvedRecord]:
    """Load a file produced by :func:`write_csv`."""
    if isinstance(source, (str, Path)):
        with open(source, newline="", encoding="utf-8") as handle:
            return _read_rows(handle)
    return _read_rows(source)


def _read_rows(handle: TextIO) -> list[ResolvedRecord]:
    return [
        ResolvedRecord(
            app_name=row["App Name"],
            occurred_at=parse_start_time(row["Start Time"]),
            meditation_minutes=int(row["Duration"]),
            dropped_seconds=int(row["Dropped Seconds"]),
        )
        for row in csv.DictReader(handle)
    ]


def describe_destination(destination: Destination) -> str:
    if isinstance(destination, (str, Path)):
        return str(destination)
    return str(getattr(destination, "name", "<stream>"))
