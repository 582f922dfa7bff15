from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable

import pytest

MINDFUL = "HKCategoryTypeIdentifierMindfulSession"


def record_xml(
    app: str,
    start: str,
    end: str,
    record_type: str = MINDFUL,
) -> str:
    return (
        f'<Record type="{record_type}" sourceName="{app}" sourceVersion="1.0" '
        f'creationDate="{end}" startDate="{start}" endDate="{end}" value="HKCategoryValueNotApplicable"/>'
    )


def export_xml(records: Iterable[str]) -> str:
    body = "\n ".join(records)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        "<HealthData locale=\"en_US\">\n"
        ' <ExportDate value="2024-02-01 10:00:00 +0000"/>\n'
        f" {body}\n"
        "</HealthData>\n"
    )


@pytest.fixture
def write_export(tmp_path: Path) -> Callable[[Iterable[str]], Path]:
    def _write(records: Iterable[str]) -> Path:
        path = tmp_path / "export.xml"
        path.write_text(export_xml(records), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_export(write_export) -> Path:
    return write_export(
        [
            record_xml("Calm", "2024-01-01 08:00:00 +0000", "2024-01-01 08:05:30 +0000"),
            '<Record type="HKQuantityTypeIdentifierStepCount" sourceName="iPhone" '
            'startDate="2024-01-01 08:00:00 +0000" endDate="2024-01-01 08:10:00 +0000" value="120"/>',
        ]
    )
