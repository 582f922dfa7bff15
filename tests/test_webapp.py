from __future__ import annotations

import csv
import io

import pytest
from fastapi.testclient import TestClient

from conftest import export_xml, record_xml
from mindful_export.webapp import create_app


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def _payload(*records: str) -> bytes:
    return export_xml(records).encode("utf-8")


def test_status(client: TestClient) -> None:
    response = client.get("/api/status")

    assert response.status_code == 200
    assert response.json()["session_type"] == "HKCategoryTypeIdentifierMindfulSession"


def test_extract_returns_summary_and_csv(client: TestClient) -> None:
    body = _payload(
        record_xml("Headspace", "2024-01-01 07:00:00 +0000", "2024-01-01 07:10:05 +0000"),
        record_xml("Calm", "2024-01-01 08:00:00 +0000", "2024-01-01 08:00:20 +0000"),
        record_xml("Headspace", "2024-01-02 07:00:00 +0000", "2024-01-02 07:10:00 +0000"),
    )

    response = client.post("/api/extract", content=body)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["summary"] == "Calm: 1 entry\nHeadspace: 2 entries\n"
    assert data["entries"] == [
        {"app_name": "Calm", "count": 1},
        {"app_name": "Headspace", "count": 2},
    ]
    assert data["exported_rows"] == 2
    assert data["filename"] == "bloom-data-ah.csv"
    rows = list(csv.reader(io.StringIO(data["csv"])))
    assert rows[1] == ["Headspace", "2024-01-01T07:00:00Z", "10", "5"]


def test_extract_empty_export(client: TestClient) -> None:
    response = client.post("/api/extract", content=_payload())

    assert response.status_code == 200
    assert response.json()["status"] == "empty"
    assert response.json()["csv"] is None


def test_extract_csv_download(client: TestClient) -> None:
    body = _payload(
        record_xml("Calm", "2024-01-01 08:00:00 +0000", "2024-01-01 08:05:30 +0000")
    )

    response = client.post("/api/extract.csv", content=body)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "bloom-data-ah.csv" in response.headers["content-disposition"]
    assert response.text.splitlines()[1] == "Calm,2024-01-01T08:00:00Z,5,30"


def test_extract_csv_without_sessions_is_404(client: TestClient) -> None:
    assert client.post("/api/extract.csv", content=_payload()).status_code == 404


def test_malformed_xml_is_400(client: TestClient) -> None:
    assert client.post("/api/extract", content=b"<HealthData>").status_code == 400


def test_missing_body_is_400(client: TestClient) -> None:
    assert client.post("/api/extract").status_code == 400


def test_bad_timestamp_is_422_unless_skipped(client: TestClient) -> None:
    body = _payload(
        record_xml("Calm", "2024-01-01 08:00:00 +0000", "2024-01-01 08:05:30 +0000"),
        record_xml("Oak", "bad", "bad"),
    )

    assert client.post("/api/extract", content=body).status_code == 422

    response = client.post("/api/extract", params={"skip_bad_timestamps": True}, content=body)
    assert response.status_code == 200
    assert response.json()["summary"] == "Calm: 1 entry\n"


def test_extraction_runs_off_the_event_loop(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    import mindful_export.webapp as webapp

    offloaded = []
    real_run_in_threadpool = webapp.run_in_threadpool

    async def recording_run_in_threadpool(func, *args, **kwargs):
        offloaded.append(func.__name__)
        return await real_run_in_threadpool(func, *args, **kwargs)

    monkeypatch.setattr(webapp, "run_in_threadpool", recording_run_in_threadpool)
    body = _payload(
        record_xml("Calm", "2024-01-01 08:00:00 +0000", "2024-01-01 08:05:30 +0000")
    )

    client.post("/api/extract", content=body)
    client.post("/api/extract.csv", content=body)

    assert offloaded == ["_run", "_run"]
