"""Per-app frequency summary of resolved sessions."""

from __future__ import annotations

from typing import Iterable

from .models import ResolvedRecord


def count_by_app(records: Iterable[ResolvedRecord]) -> list[tuple[str, int]]:
    """Return ``(app_name, count)`` pairs, fewest first, ties in first-seen order."""
    totals: dict[str, int] = {}
    for record in records:
        totals[record.app_name] = totals.get(record.app_name, 0) + 1
    return sorted(totals.items(), key=lambda item: item[1])


def format_count(app_name: str, count: int) -> str:
    noun = "entry" if count == 1 else "entries"
    return f"{app_name}: {count} {noun}"


def render_summary(records: Iterable[ResolvedRecord]) -> str:
    return "".join(f"{format_count(app, count)}\n" for app, count in count_by_app(records))
