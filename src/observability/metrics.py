"""
Prometheus metrics collection for the provider validation pipeline

This module provides metrics instrumentation for monitoring job
throughput, data quality, and collaborator health.
"""
import os

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Private registry so tests and multiple apps do not collide with the default one
REGISTRY = CollectorRegistry()


# =======================
# JOB METRICS
# =======================

jobs_total = Counter(
    name="provider_validation_jobs_total",
    documentation="Validation jobs that reached a terminal state",
    labelnames=["status"],  # status: completed, failed
    registry=REGISTRY,
)

job_duration_seconds = Histogram(
    name="provider_validation_job_duration_seconds",
    documentation="Time from processing start to terminal state",
    labelnames=["status"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
    registry=REGISTRY,
)

job_size_records = Histogram(
    name="provider_validation_job_size_records",
    documentation="Number of records per uploaded file",
    buckets=[10, 50, 100, 500, 1000, 5000, 10000, 50000],
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

records_processed_total = Counter(
    name="provider_validation_records_processed_total",
    documentation="Records classified by the pipeline",
    labelnames=["status"],  # status: valid, invalid
    registry=REGISTRY,
)

validation_failures_total = Counter(
    name="provider_validation_failures_total",
    documentation="Field-level validation errors",
    labelnames=["field_name"],
    registry=REGISTRY,
)

validation_warnings_total = Counter(
    name="provider_validation_warnings_total",
    documentation="Field-level validation warnings (non-blocking issues)",
    labelnames=["field_name"],
    registry=REGISTRY,
)

# =======================
# COLLABORATOR METRICS
# =======================

provider_writes_total = Counter(
    name="provider_store_writes_total",
    documentation="Provider store mutations",
    labelnames=["operation", "status"],  # operation: create, update, delete
    registry=REGISTRY,
)

audit_write_failures_total = Counter(
    name="provider_audit_write_failures_total",
    documentation="Audit entries that could not be written",
    labelnames=["action"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    """Content type for the Prometheus exposition format"""
    return CONTENT_TYPE_LATEST


def metrics_enabled() -> bool:
    return os.getenv("METRICS_ENABLED", "true").lower() in ("1", "true", "yes")


def record_job_finished(
    status: str,
    total_records: int,
    valid_records: int,
    invalid_records: int,
    duration_seconds: float,
) -> None:
    """
    Record the metrics of a job that reached a terminal state.

    Args:
        status: "completed" or "failed"
        total_records: Rows in the file
        valid_records: Rows imported
        invalid_records: Rows rejected
        duration_seconds: Processing duration in seconds
    """
    jobs_total.labels(status=status).inc()
    job_duration_seconds.labels(status=status).observe(duration_seconds)

    if status == "completed":
        job_size_records.observe(total_records)
        records_processed_total.labels(status="valid").inc(valid_records)
        records_processed_total.labels(status="invalid").inc(invalid_records)


def record_field_issue(field_name: str, severity: str) -> None:
    """Count one validation error or warning for a field."""
    if severity == "error":
        validation_failures_total.labels(field_name=field_name).inc()
    else:
        validation_warnings_total.labels(field_name=field_name).inc()


def record_provider_write(operation: str, success: bool = True) -> None:
    provider_writes_total.labels(operation=operation, status="success" if success else "failure").inc()


def record_audit_failure(action: str) -> None:
    audit_write_failures_total.labels(action=action).inc()
