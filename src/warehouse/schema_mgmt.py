"""
Schema management for the PostgreSQL backend.

Creates and drops the provider, job, job error and audit tables.
"""

from .connection import DatabaseConnectionPool

TABLE_DDL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS providers (
        id TEXT PRIMARY KEY,
        npi TEXT,
        first_name TEXT NOT NULL,
        last_name TEXT NOT NULL,
        specialty TEXT,
        phone TEXT,
        email TEXT,
        address_line1 TEXT,
        address_line2 TEXT,
        city TEXT,
        state TEXT,
        zip_code TEXT,
        license_number TEXT,
        license_state TEXT,
        license_expiry TEXT,
        credential TEXT,
        taxonomy_code TEXT,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        data_quality_score INTEGER NOT NULL CHECK (data_quality_score BETWEEN 0 AND 100),
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL,
        created_by TEXT,
        updated_by TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS validation_jobs (
        id TEXT PRIMARY KEY,
        file_name TEXT NOT NULL,
        file_path TEXT NOT NULL,
        file_type TEXT NOT NULL,
        status TEXT NOT NULL CHECK (status IN ('pending', 'processing', 'completed', 'failed')),
        total_records INTEGER NOT NULL DEFAULT 0,
        valid_records INTEGER NOT NULL DEFAULT 0,
        invalid_records INTEGER NOT NULL DEFAULT 0,
        warnings_count INTEGER NOT NULL DEFAULT 0,
        failure_reason TEXT,
        created_at TIMESTAMPTZ NOT NULL,
        started_at TIMESTAMPTZ,
        completed_at TIMESTAMPTZ,
        created_by TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS validation_errors (
        seq BIGSERIAL PRIMARY KEY,
        id TEXT UNIQUE NOT NULL,
        job_id TEXT NOT NULL REFERENCES validation_jobs (id),
        row_number INTEGER NOT NULL,
        field_name TEXT NOT NULL,
        error_type TEXT NOT NULL CHECK (error_type IN ('error', 'warning')),
        error_message TEXT NOT NULL,
        current_value TEXT,
        suggested_value TEXT,
        created_at TIMESTAMPTZ NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_validation_errors_job ON validation_errors (job_id, row_number, seq)",
    """
    CREATE TABLE IF NOT EXISTS audit_logs (
        seq BIGSERIAL PRIMARY KEY,
        id TEXT UNIQUE NOT NULL,
        action TEXT NOT NULL CHECK (action IN ('CREATE', 'UPDATE', 'DELETE')),
        entity_type TEXT NOT NULL,
        entity_id TEXT NOT NULL,
        old_value TEXT,
        new_value TEXT,
        actor_id TEXT NOT NULL,
        ip_address TEXT,
        created_at TIMESTAMPTZ NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_audit_logs_entity ON audit_logs (entity_id, seq)",
)

TABLES: tuple[str, ...] = ("audit_logs", "validation_errors", "validation_jobs", "providers")


class SchemaManager:
    """
    Creates and tears down the pipeline tables.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize schema manager.

        Args:
            pool: Database connection pool
        """
        self.pool = pool

    def create_tables(self) -> None:
        """Create all tables and indexes if they do not exist."""
        with self.pool.get_cursor() as cur:
            for statement in TABLE_DDL:
                cur.execute(statement)

    def truncate_tables(self) -> None:
        """Remove all rows (used by tests)."""
        with self.pool.get_cursor() as cur:
            cur.execute(f"TRUNCATE TABLE {', '.join(TABLES)} CASCADE")

    def drop_tables(self) -> None:
        with self.pool.get_cursor() as cur:
            for table in TABLES:
                cur.execute(f"DROP TABLE IF EXISTS {table} CASCADE")
