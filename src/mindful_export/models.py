"""Domain models for mindful session records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class RawMindfulRecord:
    """Attribute text of one matching ``Record`` element, before any decoding."""

    app: str
    start: str
    end: str


@dataclass(frozen=True, slots=True)
class ResolvedRecord:
    """A mindful session ready for aggregation or export."""

    app_name: str
    occurred_at: datetime
    meditation_minutes: int
    dropped_seconds: int

    @property
    def total_seconds(self) -> int:
        return self.meditation_minutes * 60 + self.dropped_seconds


class ExtractionStatus(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class ExtractionResult:
    """Outcome of one pipeline run, handed back to whoever reports it."""

    status: ExtractionStatus
    records: list[ResolvedRecord] = field(default_factory=list)
    summary: str = ""
    destination: Optional[str] = None
    exported_rows: int = 0
