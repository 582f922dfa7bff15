from __future__ import annotations

from datetime import datetime, timezone

from mindful_export.models import ResolvedRecord
from mindful_export.reporting import count_by_app, format_count, render_summary

WHEN = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)


def _records(*apps: str, minutes: int = 5) -> list[ResolvedRecord]:
    return [ResolvedRecord(app, WHEN, minutes, 0) for app in apps]


def test_counts_sorted_ascending_with_first_seen_ties() -> None:
    records = _records("Calm", "Oak", "Headspace", "Calm", "Oak", "Calm", "Insight")

    assert count_by_app(records) == [
        ("Headspace", 1),
        ("Insight", 1),
        ("Oak", 2),
        ("Calm", 3),
    ]


def test_zero_minute_records_are_counted() -> None:
    assert count_by_app(_records("Calm", "Calm", minutes=0)) == [("Calm", 2)]


def test_singular_and_plural() -> None:
    assert format_count("Calm", 1) == "Calm: 1 entry"
    assert format_count("Calm", 0) == "Calm: 0 entries"
    assert format_count("Headspace", 2) == "Headspace: 2 entries"


def test_render_summary_lines() -> None:
    summary = render_summary(_records("Headspace", "Calm", "Headspace"))

    assert summary == "Calm: 1 entry\nHeadspace: 2 entries\n"


def test_render_summary_of_nothing_is_empty() -> None:
    assert render_summary([]) == ""
