"""
PostgreSQL store implementations.

Writes go through single statements so the database serializes them; job
transitions use a conditional UPDATE as a compare-and-set, and provider
edits lock the row for their read-modify-write.
"""

from collections.abc import Callable

import psycopg

from src.core.exceptions import ProviderNotFoundError
from src.core.models import JobError, ProviderRecord, ValidationJob
from src.observability.logger import get_logger

from .audit import PostgresAuditStore
from .connection import DatabaseConnectionPool
from .store import JobErrorStore, JobStore, ProviderStore, Stores

logger = get_logger(__name__)

PROVIDER_COLUMNS: tuple[str, ...] = tuple(ProviderRecord.model_fields)
JOB_COLUMNS: tuple[str, ...] = tuple(ValidationJob.model_fields)
JOB_ERROR_COLUMNS: tuple[str, ...] = tuple(JobError.model_fields)


def _insert_sql(table: str, columns: tuple[str, ...]) -> str:
    names = ", ".join(columns)
    placeholders = ", ".join(f"%({c})s" for c in columns)
    return f"INSERT INTO {table} ({names}) VALUES ({placeholders})"


def _update_sql(table: str, columns: tuple[str, ...], where: str) -> str:
    assignments = ", ".join(f"{c} = %({c})s" for c in columns if c != "id")
    return f"UPDATE {table} SET {assignments} WHERE {where}"


class PostgresProviderStore(ProviderStore):
    """
    Provider store backed by the ``providers`` table.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def create(self, provider: ProviderRecord) -> ProviderRecord:
        try:
            self.pool.execute_command(_insert_sql("providers", PROVIDER_COLUMNS), provider.model_dump())
        except psycopg.DatabaseError as e:
            logger.error(f"Failed to insert provider {provider.id}: {e}")
            raise
        return provider

    def find(self, provider_id: str) -> ProviderRecord | None:
        rows = self.pool.execute_query("SELECT * FROM providers WHERE id = %s", (provider_id,))
        return ProviderRecord(**rows[0]) if rows else None

    def update(self, provider: ProviderRecord) -> ProviderRecord:
        updated = self.pool.execute_command(
            _update_sql("providers", PROVIDER_COLUMNS, "id = %(id)s"), provider.model_dump()
        )
        if updated == 0:
            raise ProviderNotFoundError(provider.id)
        return provider

    def modify(
        self,
        provider_id: str,
        change: Callable[[ProviderRecord], ProviderRecord],
    ) -> tuple[ProviderRecord, ProviderRecord]:
        # Row lock held until the block commits
        with self.pool.get_cursor() as cur:
            cur.execute("SELECT * FROM providers WHERE id = %s FOR UPDATE", (provider_id,))
            row = cur.fetchone()
            if row is None:
                raise ProviderNotFoundError(provider_id)
            old = ProviderRecord(**row)
            new = change(old)
            cur.execute(_update_sql("providers", PROVIDER_COLUMNS, "id = %(id)s"), new.model_dump())
        return old, new

    def delete(self, provider_id: str) -> bool:
        return self.pool.execute_command("DELETE FROM providers WHERE id = %s", (provider_id,)) > 0

    def count(self) -> int:
        return self.pool.execute_query("SELECT COUNT(*) AS count FROM providers")[0]["count"]


class PostgresJobStore(JobStore):
    """
    Job store backed by the ``validation_jobs`` table.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def create(self, job: ValidationJob) -> ValidationJob:
        self.pool.execute_command(_insert_sql("validation_jobs", JOB_COLUMNS), job.model_dump())
        return job

    def find(self, job_id: str) -> ValidationJob | None:
        rows = self.pool.execute_query("SELECT * FROM validation_jobs WHERE id = %s", (job_id,))
        return ValidationJob(**rows[0]) if rows else None

    def transition(self, job_id: str, expected_status: str, job: ValidationJob) -> bool:
        params = job.model_dump()
        params["id"] = job_id
        params["expected_status"] = expected_status
        updated = self.pool.execute_command(
            _update_sql("validation_jobs", JOB_COLUMNS, "id = %(id)s AND status = %(expected_status)s"),
            params,
        )
        return updated == 1


class PostgresJobErrorStore(JobErrorStore):
    """
    Job error store backed by the ``validation_errors`` table.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def add_many(self, errors: list[JobError]) -> int:
        if not errors:
            return 0
        self.pool.execute_batch(
            _insert_sql("validation_errors", JOB_ERROR_COLUMNS),
            [e.model_dump() for e in errors],
        )
        return len(errors)

    def list_for_job(self, job_id: str) -> list[JobError]:
        columns = ", ".join(JOB_ERROR_COLUMNS)
        rows = self.pool.execute_query(
            f"SELECT {columns} FROM validation_errors WHERE job_id = %s ORDER BY row_number, seq",
            (job_id,),
        )
        return [JobError(**row) for row in rows]


def create_postgres_stores(pool: DatabaseConnectionPool) -> Stores:
    return Stores(
        providers=PostgresProviderStore(pool),
        jobs=PostgresJobStore(pool),
        job_errors=PostgresJobErrorStore(pool),
        audit=PostgresAuditStore(pool),
    )
