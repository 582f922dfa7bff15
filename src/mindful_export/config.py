"""Configuration models and helpers for the extractor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


MINDFUL_SESSION_TYPE = "HKCategoryTypeIdentifierMindfulSession"
RECORD_TAG = "Record"
DEFAULT_OUTPUT_NAME = "bloom-data-ah.csv"


class TimestampPolicy(str, Enum):
    """What to do with a session whose timestamps cannot be parsed."""

    ABORT = "abort"
    SKIP = "skip"


@dataclass(slots=True)
class ExtractorSettings:
    """Runtime configuration for the extraction pipeline."""

    record_tag: str = RECORD_TAG
    session_type: str = MINDFUL_SESSION_TYPE
    timestamp_policy: TimestampPolicy = TimestampPolicy.ABORT
    skip_zero_minutes: bool = True
    output_name: str = DEFAULT_OUTPUT_NAME

    @classmethod
    def from_options(
        cls,
        skip_bad_timestamps: bool = False,
        keep_zero_minutes: bool = False,
        output_name: str | None = None,
    ) -> "ExtractorSettings":
        return cls(
            timestamp_policy=(
                TimestampPolicy.SKIP if skip_bad_timestamps else TimestampPolicy.ABORT
            ),
            skip_zero_minutes=not keep_zero_minutes,
            output_name=output_name or DEFAULT_OUTPUT_NAME,
        )
