"""
Pytest configuration and fixtures for provider-validation tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import csv
import os
import zipfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from src.core.classifier import RecordClassifier
from src.core.rules import ReferenceData
from src.core.settings import Settings
from src.services.application import Application, build_application
from src.warehouse.memory_store import create_memory_stores
from src.warehouse.store import Stores


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# SAMPLE DATA
# =======================

PROVIDER_HEADER = [
    "npi", "first_name", "last_name", "specialty", "phone", "email",
    "city", "state", "license_state",
]

VALID_ROW = {
    "npi": "1234567890",
    "first_name": "Asha",
    "last_name": "Raman",
    "specialty": "Cardiology",
    "phone": "+91-98765-43210",
    "email": "asha.raman@example.com",
    "city": "Bengaluru",
    "state": "KA",
    "license_state": "KA",
}


def make_row(**overrides) -> dict[str, str]:
    """A valid provider row with selected fields replaced"""
    return {**VALID_ROW, **overrides}


def write_csv(path: Path, rows: list[dict[str, str]], header: list[str] | None = None) -> Path:
    header = header or PROVIDER_HEADER
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=header, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)
    return path


def write_xlsx(path: Path, rows: list[dict[str, str]], header: list[str] | None = None) -> Path:
    from openpyxl import Workbook

    header = header or PROVIDER_HEADER
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(header)
    for row in rows:
        sheet.append([row.get(column, "") for column in header])
    workbook.save(path)
    return path


def break_first_sheet(source: Path, target: Path) -> Path:
    """Copy a workbook, truncating the XML of its first worksheet"""
    with zipfile.ZipFile(source) as src, zipfile.ZipFile(target, "w") as dst:
        for item in src.infolist():
            data = src.read(item.filename)
            if item.filename == "xl/worksheets/sheet1.xml":
                data = data[: len(data) // 2]
            dst.writestr(item, data)
    return target


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture
def csv_file(tmp_path) -> Callable[..., Path]:
    """
    Factory writing provider rows to a CSV file in tmp_path

    Returns:
        Callable(rows, header=None, name="providers.csv") -> Path
    """
    def _write(rows, header=None, name="providers.csv"):
        return write_csv(tmp_path / name, rows, header)
    return _write


@pytest.fixture
def xlsx_file(tmp_path) -> Callable[..., Path]:
    """
    Factory writing provider rows to an XLSX workbook in tmp_path

    Returns:
        Callable(rows, header=None, name="providers.xlsx") -> Path
    """
    def _write(rows, header=None, name="providers.xlsx"):
        return write_xlsx(tmp_path / name, rows, header)
    return _write


@pytest.fixture(scope="session")
def reference_data_path() -> Path:
    """Path to the shipped reference data YAML"""
    return Path(__file__).resolve().parent.parent / "config" / "reference_data.yaml"


# =======================
# PIPELINE FIXTURES
# =======================

@pytest.fixture
def reference() -> ReferenceData:
    return ReferenceData()


@pytest.fixture
def classifier(reference) -> RecordClassifier:
    return RecordClassifier(reference, max_workers=2)


@pytest.fixture
def memory_stores() -> Stores:
    return create_memory_stores()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(upload_dir=tmp_path / "uploads", job_workers=2, classifier_workers=2)


@pytest.fixture
def application(settings, memory_stores) -> Generator[Application, None, None]:
    """
    In-memory pipeline without a background executor

    Uploads stay pending until the test calls orchestrator.run().
    """
    app = build_application(settings, stores=memory_stores, run_in_background=False)
    yield app
    app.close()


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container():
    """
    Start PostgreSQL container for integration tests

    Skips the requesting tests when Docker is not available.

    Yields:
        PostgresContainer instance
    """
    testcontainers_postgres = pytest.importorskip("testcontainers.postgres")

    try:
        container = testcontainers_postgres.PostgresContainer(
            image="postgres:16.2-alpine",
            username="test_registry",
            password="test_password",
            dbname="test_provider_registry",
        )
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def db_pool(postgres_container):
    """
    Open connection pool against the test container with tables created

    Yields:
        DatabaseConnectionPool
    """
    from src.warehouse.connection import DatabaseConnectionPool
    from src.warehouse.schema_mgmt import SchemaManager

    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_provider_registry",
        user="test_registry",
        password="test_password",
    )
    pool.open()
    SchemaManager(pool).create_tables()
    yield pool
    pool.close()


@pytest.fixture
def clean_db(db_pool):
    """
    Provide a clean database by truncating all tables before each test

    Yields:
        DatabaseConnectionPool with empty tables
    """
    from src.warehouse.schema_mgmt import SchemaManager

    SchemaManager(db_pool).truncate_tables()
    yield db_pool


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep host environment variables out of Settings.from_env()"""
    for name in ("UPLOAD_DIR", "MAX_UPLOAD_BYTES", "REFERENCE_DATA_PATH", "STORE_BACKEND",
                 "JOB_WORKERS", "CLASSIFIER_WORKERS", "METRICS_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_FORMAT", os.getenv("TEST_LOG_FORMAT", "text"))
