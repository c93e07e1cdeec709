"""
Store contracts for providers, validation jobs, job errors and audit entries.

The pipeline depends only on these interfaces; concrete engines live in
memory_store (default, process-local) and postgres_store (psycopg 3).
Implementations must serialize writes so concurrent jobs and edits never
lose updates.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from src.core.models import AuditEntry, JobError, ProviderRecord, ValidationJob


class ProviderStore(ABC):
    """Persisted provider records."""

    @abstractmethod
    def create(self, provider: ProviderRecord) -> ProviderRecord:
        """Insert a new provider and return it."""

    @abstractmethod
    def find(self, provider_id: str) -> ProviderRecord | None:
        """Return the provider with this id, or None."""

    @abstractmethod
    def update(self, provider: ProviderRecord) -> ProviderRecord:
        """Replace an existing provider; raises ProviderNotFoundError if absent."""

    @abstractmethod
    def modify(
        self,
        provider_id: str,
        change: Callable[[ProviderRecord], ProviderRecord],
    ) -> tuple[ProviderRecord, ProviderRecord]:
        """
        Atomically read a provider, apply ``change`` and write the result.

        No other write to the same provider may land between the read and
        the write. Returns ``(old, new)``; raises ProviderNotFoundError if absent.
        """

    @abstractmethod
    def delete(self, provider_id: str) -> bool:
        """Remove a provider; returns False when it did not exist."""

    @abstractmethod
    def count(self) -> int:
        """Number of stored providers."""


class JobStore(ABC):
    """Validation job records."""

    @abstractmethod
    def create(self, job: ValidationJob) -> ValidationJob:
        """Insert a new job."""

    @abstractmethod
    def find(self, job_id: str) -> ValidationJob | None:
        """Return the job with this id, or None."""

    @abstractmethod
    def transition(self, job_id: str, expected_status: str, job: ValidationJob) -> bool:
        """
        Compare-and-set write of a job.

        Stores ``job`` only if the stored job currently has ``expected_status``.
        Returns True when the write happened. This is what makes terminal
        transitions happen exactly once even if a worker is retried.
        """


class JobErrorStore(ABC):
    """Per-row issues recorded for a job."""

    @abstractmethod
    def add_many(self, errors: list[JobError]) -> int:
        """Append issues; returns how many were stored."""

    @abstractmethod
    def list_for_job(self, job_id: str) -> list[JobError]:
        """All issues of a job ordered by row number (file order within a row)."""


class AuditStore(ABC):
    """Append-only audit sink."""

    @abstractmethod
    def append(self, entry: AuditEntry) -> None:
        """Append one entry. Entries are never mutated or deleted."""

    @abstractmethod
    def list_for_entity(self, entity_id: str) -> list[AuditEntry]:
        """Entries for one entity, oldest first."""


@dataclass(frozen=True)
class Stores:
    """The set of stores a pipeline instance works against."""

    providers: ProviderStore
    jobs: JobStore
    job_errors: JobErrorStore
    audit: AuditStore
