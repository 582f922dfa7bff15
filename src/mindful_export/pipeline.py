"""Run the scan, resolve, summarize and export steps end to end."""

from __future__ import annotations

import logging
from typing import Optional

from .config import ExtractorSettings
from .durations import resolve_records
from .export import Destination, describe_destination, write_csv
from .models import ExtractionResult, ExtractionStatus, ResolvedRecord
from .parsing import Source, read_mindful_sessions
from .reporting import render_summary

logger = logging.getLogger(__name__)


def extract_records(
    source: Source, settings: Optional[ExtractorSettings] = None
) -> list[ResolvedRecord]:
    """Scan the whole document, then resolve every mindful session found."""
    settings = settings or ExtractorSettings()
    raws = list(read_mindful_sessions(source, settings))
    logger.info("Found %d mindful session records.", len(raws))
    return resolve_records(raws, settings)


def summarize(records: list[ResolvedRecord]) -> ExtractionResult:
    if not records:
        return ExtractionResult(status=ExtractionStatus.EMPTY)
    return ExtractionResult(
        status=ExtractionStatus.SUCCESS,
        records=records,
        summary=render_summary(records),
    )


def export_result(
    result: ExtractionResult,
    destination: Destination,
    settings: Optional[ExtractorSettings] = None,
) -> ExtractionResult:
    """Write a successful result's records and note where they went."""
    if result.status is not ExtractionStatus.SUCCESS:
        return result
    result.exported_rows = write_csv(result.records, destination, settings)
    result.destination = describe_destination(destination)
    return result


def run_extraction(
    source: Source,
    destination: Optional[Destination] = None,
    settings: Optional[ExtractorSettings] = None,
) -> ExtractionResult:
    """Extract, summarize and (when a destination is given) write the CSV.

    An export without mindful sessions yields ``ExtractionStatus.EMPTY`` and
    nothing is written.
    """
    settings = settings or ExtractorSettings()
    result = summarize(extract_records(source, settings))
    if result.status is ExtractionStatus.EMPTY:
        logger.info("No mindful sessions found; nothing to export.")
        return result
    if destination is not None:
        export_result(result, destination, settings)
    return result
