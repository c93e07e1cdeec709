"""
End-to-end test: upload a dirty provider file over HTTP, let the background
executor process it, then read the status and report.

Covers:
1. Upload returns immediately with a pending job
2. The job reaches a terminal state on its own
3. valid + invalid == total, with valid == N - k for k bad rows
4. The report lists every issue in row order with suggestions
5. Imported providers carry scores and audit entries
"""

import time

import pytest
from fastapi.testclient import TestClient

from conftest import make_row, write_csv, write_xlsx
from src.api import create_app
from src.services.application import build_application

pytestmark = pytest.mark.e2e


def wait_for_terminal(client, job_id, timeout=30.0) -> dict:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        job = client.get(f"/api/validation/status/{job_id}").json()["job"]
        if job["status"] in ("completed", "failed"):
            return job
        time.sleep(0.05)
    raise AssertionError(f"Job {job_id} did not finish within {timeout}s")


@pytest.fixture
def live_application(settings, memory_stores):
    application = build_application(settings, stores=memory_stores, run_in_background=True)
    yield application
    application.close()


@pytest.fixture
def client(live_application):
    with TestClient(create_app(live_application)) as client:
        yield client


def dirty_rows(n_clean: int) -> list[dict[str, str]]:
    """n_clean valid rows followed by 4 broken ones and 1 warning-only row"""
    rows = [make_row(npi=f"{9000000000 + i}") for i in range(n_clean)]
    rows += [
        make_row(npi="12345"),
        make_row(npi="8000000001", email="john@invalid"),
        make_row(npi="8000000002", specialty="General Practice"),
        make_row(npi="8000000003", license_state="California"),
        make_row(npi="8000000004", phone="9876543210", city=""),
    ]
    return rows


class TestUploadFlow:
    """End-to-end upload, processing and reporting"""

    @pytest.mark.parametrize("writer, name", [(write_csv, "dirty.csv"), (write_xlsx, "dirty.xlsx")])
    def test_dirty_file(self, client, live_application, tmp_path, writer, name):
        path = writer(tmp_path / name, dirty_rows(20))

        with open(path, "rb") as f:
            response = client.post(
                "/api/validation/upload",
                files={"file": (name, f, "application/octet-stream")},
                headers={"X-User-Id": "e2e-user"},
            )
        assert response.status_code == 201
        job_id = response.json()["jobId"]

        job = wait_for_terminal(client, job_id)

        assert job["status"] == "completed"
        assert job["total_records"] == 25
        assert job["invalid_records"] == 4
        assert job["valid_records"] == 21
        assert job["valid_records"] + job["invalid_records"] == job["total_records"]
        assert job["warnings_count"] == 2

        report = client.get(f"/api/validation/report/{job_id}").json()
        issues = [(e["row_number"], e["field_name"], e["error_type"], e["suggested_value"]) for e in report["errors"]]
        assert issues == [
            (22, "npi", "error", "0000012345"),
            (23, "email", "error", "john@invalid"),
            (24, "specialty", "error", "Internal Medicine"),
            (25, "license_state", "error", "CA"),
            (26, "phone", "warning", "+91-98765-43210"),
            (26, "completeness", "warning", None),
        ]

        providers = live_application.stores.providers
        assert providers.count() == 21
        audit = live_application.stores.audit.all()
        assert len(audit) == 21
        assert {entry.actor_id for entry in audit} == {"e2e-user"}
        assert all(0 <= p.data_quality_score <= 100 for p in providers.all())

    def test_corrupt_upload_fails(self, client, live_application):
        response = client.post(
            "/api/validation/upload",
            files={"file": ("broken.xlsx", b"PK\x03\x04 definitely not a workbook", "application/octet-stream")},
        )
        job = wait_for_terminal(client, response.json()["jobId"])

        assert job["status"] == "failed"
        assert job["failure_reason"]
        assert live_application.stores.providers.count() == 0
        assert client.get(f"/api/validation/report/{job['id']}").json()["errors"] == []

    def test_parallel_uploads(self, client, live_application, tmp_path):
        job_ids = []
        for i in range(4):
            rows = [make_row(npi=f"{7000000000 + i * 100 + j}") for j in range(10)] + [make_row(npi="1")]
            path = write_csv(tmp_path / f"batch-{i}.csv", rows)
            response = client.post(
                "/api/validation/upload",
                files={"file": (path.name, path.read_bytes(), "text/csv")},
            )
            job_ids.append(response.json()["jobId"])

        jobs = [wait_for_terminal(client, job_id) for job_id in job_ids]

        assert all(job["status"] == "completed" for job in jobs)
        assert all((job["valid_records"], job["invalid_records"]) == (10, 1) for job in jobs)
        assert live_application.stores.providers.count() == 40
